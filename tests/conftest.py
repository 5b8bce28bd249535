"""Shared pytest fixtures."""

import asyncio
from typing import Any, List, Optional, Tuple

import pytest

from sales_assistant.adapters.base import BaseTextAdapter
from sales_assistant.config import Settings
from sales_assistant.db.connection import DatabaseConnection
from sales_assistant.models.metadata import SalesMetadata
from sales_assistant.services.chat_service import ChatService


class ScriptedAdapter(BaseTextAdapter):
    """Adapter returning scripted values and recording every call."""

    def __init__(self):
        super().__init__({})
        self.title: Any = "Laptop Shopping"
        # Text, an exception, or a callable taking the user message
        self.response: Any = "Happy to help you find the right laptop!"
        # Seconds each reply takes
        self.delay = 0.0
        # Queue of extraction replies: SalesMetadata, dict, str or an exception
        self.metadata_replies: List[Any] = []
        self.calls: List[Tuple[str, tuple]] = []

    @staticmethod
    def _resolve(value: Any) -> Any:
        if isinstance(value, BaseException):
            raise value
        return value

    async def generate_title(self, first_message: str) -> str:
        self.calls.append(("generate_title", (first_message,)))
        return self._resolve(self.title)

    async def generate_response(self, user_message: str, metadata: Optional[SalesMetadata] = None) -> str:
        self.calls.append(("generate_response", (user_message, metadata)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if callable(self.response):
            return self.response(user_message)
        return self._resolve(self.response)

    async def extract_metadata(self, history_text: str, current_metadata: Optional[SalesMetadata] = None):
        self.calls.append(("extract_metadata", (history_text, current_metadata)))
        reply = self.metadata_replies.pop(0) if self.metadata_replies else SalesMetadata()
        return self._resolve(reply)

    def calls_to(self, name: str) -> List[tuple]:
        return [args for call, args in self.calls if call == name]


@pytest.fixture
def db_conn(tmp_path):
    """Provide a fresh database connection."""
    db = DatabaseConnection(str(tmp_path / "test.db"))
    yield db
    db.close()


@pytest.fixture
def test_settings():
    """Settings isolated from the environment."""
    return Settings(
        _env_file=None,
        adapter="offline",
        adapter_timeout=1.0,
        log_level="WARNING",
        log_file=None,
    )


@pytest.fixture
def adapter():
    return ScriptedAdapter()


@pytest.fixture
def service(db_conn, adapter, test_settings):
    """ChatService over a fresh database and the scripted adapter."""
    return ChatService(db_conn, adapter, test_settings)
