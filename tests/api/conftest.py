"""Pytest fixtures for API testing."""

import pytest
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI

from sales_assistant.api.v1 import chat, conversations, dependencies
from sales_assistant.services import ChatService


@pytest.fixture
async def client(db_conn, adapter, test_settings):
    """Create async HTTP client over a fresh database for each test."""
    # Inject the service into the routers
    dependencies.chat_service = ChatService(db_conn, adapter, test_settings)

    # Create a test app without lifespan (to avoid conflicts)
    test_app = FastAPI(title="Sales Assistant Test")
    test_app.include_router(chat.router)
    test_app.include_router(conversations.router)

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    dependencies.chat_service = None
