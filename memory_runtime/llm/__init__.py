from .base import ModelClient, ModelResponse, get_model_client, register_model_client
from .stub import StubModelClient

__all__ = [
    "ModelClient",
    "ModelResponse",
    "StubModelClient",
    "get_model_client",
    "register_model_client",
]
