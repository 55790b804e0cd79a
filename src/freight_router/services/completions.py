from __future__ import annotations

import httpx
from django.conf import settings
from pydantic import ValidationError

from freight_router.exceptions import ResponseSchemaError
from freight_router.schemas import ChatCompletionResponse
from freight_router.services.http import request_json

Message = dict[str, str]


class CompletionClient:
    """Thin client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4",
        timeout: float = 30.0,
        retry_count: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.retry_count = retry_count
        self.transport = transport

    @classmethod
    def from_settings(cls) -> CompletionClient:
        return cls(
            settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model=settings.OPENAI_MODEL,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
            retry_count=settings.OPENAI_RETRY_COUNT,
        )

    async def complete(self, messages: list[Message], *, temperature: float = 0.3) -> str:
        payload = await request_json(
            "POST",
            f"{self.base_url}/chat/completions",
            service="Completion",
            timeout=self.timeout,
            retry_count=self.retry_count,
            transport=self.transport,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={"model": self.model, "messages": messages, "temperature": temperature},
        )
        try:
            response = ChatCompletionResponse.model_validate(payload)
        except ValidationError as exc:
            raise ResponseSchemaError("Invalid completion response") from exc

        if not response.choices or not response.choices[0].message.content:
            raise ResponseSchemaError("No valid response from completion service")
        return response.choices[0].message.content.strip()
