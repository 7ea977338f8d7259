"""OpenAI-compatible chat completions client."""

import logging
import os

import httpx

from .base import ModelClient, ModelResponse, register_model_client

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4-turbo-preview"


@register_model_client("openai")
class OpenAIModelClient(ModelClient):
    """Calls ``POST {base_url}/chat/completions``."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key. If not provided, uses OPENAI_API_KEY env var.
            base_url: Optional base URL; defaults to OPENAI_BASE_URL or OpenAI's URL.
            model: Model name; defaults to OPENAI_MODEL or gpt-4-turbo-preview.
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the reply
            timeout: Request timeout in seconds
            http_client: Optional shared httpx.AsyncClient (not closed by this client)
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "OpenAI API key not provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        base_url = base_url or os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
        self.base_url = base_url.rstrip("/")
        self.model = model or os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def generate(self, messages: list[dict[str, str]], **kwargs) -> ModelResponse:
        request_json = {
            "model": kwargs.get("model", self.model),
            "messages": messages,
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        url = f"{self.base_url}/chat/completions"

        if self._http_client is not None:
            response = await self._http_client.post(url, json=request_json, headers=self._headers())
            response.raise_for_status()
            data = response.json()
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=request_json, headers=self._headers())
                response.raise_for_status()
                data = response.json()

        choices = data.get("choices") or []
        if not choices:
            raise RuntimeError("OpenAI API returned no choices")
        message = choices[0].get("message") or {}

        return ModelResponse(
            content=message.get("content") or "",
            model=data.get("model"),
            usage=data.get("usage") or {},
            stop_reason=choices[0].get("finish_reason"),
        )
