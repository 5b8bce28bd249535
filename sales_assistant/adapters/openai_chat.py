"""OpenAI chat-completions adapter."""

from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from .base import BaseTextAdapter
from . import prompts
from ..exceptions import DependencyFailure, TransientAdapterFailure
from ..models.metadata import SalesMetadata, parse_metadata, serialize_metadata

MAX_TITLE_LENGTH = 255


def format_context(metadata: Optional[SalesMetadata]) -> str:
    """Render metadata as the prompt context block."""
    if metadata is None:
        return prompts.NO_CONTEXT
    return prompts.CONTEXT_TEMPLATE.format(
        interests=", ".join(metadata.interests) or "unknown",
        offered=", ".join(metadata.offered_products) or "none",
        rejected=", ".join(metadata.rejected_products) or "none",
        status=metadata.sale_status.value,
        intent=metadata.last_intent or "unknown",
    )


class OpenAIChatAdapter(BaseTextAdapter):
    """Text adapter backed by an OpenAI-compatible chat completions API."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, client: Optional[AsyncOpenAI] = None):
        """
        Initialize the adapter.

        Args:
            config: ``model``, ``api_key``, ``base_url`` and ``timeout``
            client: Pre-built client, mainly for tests
        """
        super().__init__(config)
        self.model = self.config.get("model", "gpt-4o-mini")
        self.client = client or AsyncOpenAI(
            api_key=self.config.get("api_key"),
            base_url=self.config.get("base_url"),
            timeout=self.config.get("timeout", 30.0),
        )

    async def _complete(self, messages: List[Dict[str, str]], temperature: float, max_tokens: int) -> Optional[str]:
        """Run one chat completion and return the stripped text, if any."""
        self.logger.debug(f"[OpenAI] request model={self.model} messages={messages}")
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not completion.choices:
            return None
        content = completion.choices[0].message.content
        self.logger.debug(f"[OpenAI] reply: {content!r}")
        return content.strip() if content else None

    async def generate_title(self, first_message: str) -> str:
        title = await self._complete(
            [
                {"role": "system", "content": prompts.TITLE_SYSTEM_PROMPT},
                {"role": "user", "content": first_message},
            ],
            temperature=0.7,
            max_tokens=20,
        )
        title = (title or "").strip().strip("\"'").rstrip(".!?").strip()
        if not title:
            raise TransientAdapterFailure("No title generated")
        return title[:MAX_TITLE_LENGTH]

    async def generate_response(self, user_message: str, metadata: Optional[SalesMetadata] = None) -> str:
        system_prompt = prompts.RESPONSE_SYSTEM_PROMPT.format(context=format_context(metadata))
        response = await self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            temperature=0.7,
            max_tokens=500,
        )
        if not response:
            raise DependencyFailure("No response generated")
        return response

    async def extract_metadata(
        self,
        history_text: str,
        current_metadata: Optional[SalesMetadata] = None
    ) -> SalesMetadata:
        if current_metadata is None:
            user_prompt = prompts.EXTRACTION_INITIAL_PROMPT.format(history=history_text)
        else:
            user_prompt = prompts.EXTRACTION_UPDATE_PROMPT.format(
                metadata=serialize_metadata(current_metadata),
                history=history_text,
            )

        raw = await self._complete(
            [
                {"role": "system", "content": prompts.EXTRACTION_SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            temperature=0.3,
            max_tokens=400,
        )
        if not raw:
            raise DependencyFailure("No metadata generated")
        return parse_metadata(raw)
