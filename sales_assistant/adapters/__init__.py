"""Text adapters - language-generation backends."""

from typing import Dict, Type

from .base import BaseTextAdapter, CallPolicy, call_adapter
from .offline import OfflineAdapter
from .openai_chat import OpenAIChatAdapter

# Adapter name -> class
handlers: Dict[str, Type[BaseTextAdapter]] = {
    "openai": OpenAIChatAdapter,
    "offline": OfflineAdapter,
}

default = "openai"


def create_adapter(settings) -> BaseTextAdapter:
    """
    Instantiate the adapter selected in settings.

    Args:
        settings: Application settings instance

    Returns:
        Adapter instance

    Raises:
        ValueError: If the adapter name is not registered
    """
    name = (settings.adapter or default).lower()
    adapter_class = handlers.get(name)
    if adapter_class is None:
        raise ValueError(
            f"Unknown adapter: {settings.adapter}. "
            f"Available adapters: {', '.join(handlers.keys())}"
        )
    return adapter_class(settings.get_adapter_config())


__all__ = [
    "BaseTextAdapter",
    "CallPolicy",
    "call_adapter",
    "OfflineAdapter",
    "OpenAIChatAdapter",
    "handlers",
    "create_adapter",
]
