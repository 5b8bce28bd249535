"""Text adapter contract and the policy-driven call helper."""

import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from ..exceptions import DependencyFailure, SalesAssistantError, TransientAdapterFailure
from ..models.metadata import SalesMetadata
from ..utils.logger import get_app_logger

T = TypeVar("T")


class BaseTextAdapter(ABC):
    """
    Abstract base class for language-generation adapters.

    The chat service depends only on these three calls. Implementations
    raise ``DependencyFailure`` when the backend produces no text and
    ``MetadataParseError`` when extraction output cannot be decoded.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the adapter with configuration.

        Args:
            config: Configuration dictionary for the adapter
        """
        self.config = config or {}
        self.logger = get_app_logger()

    @abstractmethod
    async def generate_title(self, first_message: str) -> str:
        """
        Generate a short conversation title from the first user message.

        Args:
            first_message: Content of the founding user message

        Returns:
            Title text
        """
        pass

    @abstractmethod
    async def generate_response(self, user_message: str, metadata: Optional[SalesMetadata] = None) -> str:
        """
        Generate the sales assistant's reply.

        Args:
            user_message: Latest user message
            metadata: Current sales metadata used as prompt context, if any

        Returns:
            Non-empty reply text
        """
        pass

    @abstractmethod
    async def extract_metadata(
        self,
        history_text: str,
        current_metadata: Optional[SalesMetadata] = None
    ) -> SalesMetadata:
        """
        Extract sales metadata from formatted message history.

        Args:
            history_text: Lines of ``"<role label>: <content>"``
            current_metadata: Metadata to update; None to extract from scratch

        Returns:
            Proposed metadata
        """
        pass

    def get_name(self) -> str:
        """Get the human-readable name of this adapter."""
        return self.__class__.__name__.replace("Adapter", "")


class CallPolicy(str, Enum):
    """How a failed adapter call is handled at its call site."""

    # Log the failure and return the fallback value
    BEST_EFFORT = "best_effort"
    # Surface the failure to the caller
    REQUIRED = "required"


async def call_adapter(
    call: Callable[[], Awaitable[T]],
    policy: CallPolicy,
    timeout: float,
    fallback: Optional[T] = None,
    operation: str = "adapter call"
) -> T:
    """
    Await an adapter call under a timeout and apply the failure policy.

    Timeouts and unexpected exceptions become ``DependencyFailure``; domain
    errors (for example ``MetadataParseError``) keep their type.

    Args:
        call: Zero-argument factory returning the adapter coroutine
        policy: Failure policy for this call site
        timeout: Seconds to wait before treating the call as failed
        fallback: Value returned on failure under ``BEST_EFFORT``
        operation: Name used in log and error messages

    Returns:
        The adapter result, or ``fallback`` after a best-effort failure

    Raises:
        SalesAssistantError: On failure under ``REQUIRED``
    """
    logger = get_app_logger()
    try:
        return await asyncio.wait_for(call(), timeout=timeout)
    except asyncio.TimeoutError as e:
        error: SalesAssistantError = DependencyFailure(f"{operation} timed out after {timeout}s")
        error.__cause__ = e
    except SalesAssistantError as e:
        error = e
    except Exception as e:
        error = DependencyFailure(f"{operation} failed: {e}")
        error.__cause__ = e

    if policy is CallPolicy.BEST_EFFORT:
        transient = TransientAdapterFailure(str(error))
        logger.warning(f"{operation} failed, using fallback: {transient}")
        return fallback

    logger.error(f"{operation} failed: {error}")
    raise error
