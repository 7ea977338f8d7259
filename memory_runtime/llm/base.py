"""Base class for model clients.

The core never calls a model. A model client is an injected capability used by
the surrounding layer: it accepts an ordered message sequence and returns text.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

# Client registry - clients register themselves here
_CLIENT_REGISTRY: dict[str, type["ModelClient"]] = {}


def register_model_client(name: str):
    """
    Decorator to register a model client class.

    Usage:
        @register_model_client("stub")
        class StubModelClient(ModelClient):
            ...

    Args:
        name: Client name (e.g., "stub", "openai")

    Returns:
        Decorator function
    """

    def decorator(cls: type["ModelClient"]) -> type["ModelClient"]:
        _CLIENT_REGISTRY[name.lower()] = cls
        return cls

    return decorator


class ModelResponse(BaseModel):
    """Response from a model call."""

    content: str = ""
    model: str | None = None
    usage: dict[str, Any] | None = Field(default_factory=dict)
    stop_reason: str | None = None


class ModelClient(ABC):
    """Base class for model clients."""

    @abstractmethod
    async def generate(self, messages: list[dict[str, str]], **kwargs) -> ModelResponse:
        """
        Generate a reply for an ordered message sequence.

        Args:
            messages: List of message dicts with 'role' and 'content' keys
            **kwargs: Client-specific parameters

        Returns:
            ModelResponse with the reply text
        """
        pass


def get_model_client(name: str, **kwargs) -> ModelClient:
    """
    Get a model client instance by name from the registry.

    Args:
        name: Client name ("stub" or "openai")
        **kwargs: Client-specific initialization parameters

    Returns:
        ModelClient instance

    Raises:
        ValueError: If the client is not known
    """
    name_lower = name.lower()

    client_class = _CLIENT_REGISTRY.get(name_lower)
    if client_class:
        return client_class(**kwargs)

    # Importing the module triggers @register_model_client
    if name_lower == "stub":
        from . import stub  # noqa: F401
    elif name_lower == "openai":
        from . import openai  # noqa: F401
    else:
        raise ValueError(f"Unknown model client: {name}. Supported clients: openai, stub")

    client_class = _CLIENT_REGISTRY.get(name_lower)
    if not client_class:
        raise ValueError(f"Model client {name} was imported but not registered.")

    return client_class(**kwargs)
