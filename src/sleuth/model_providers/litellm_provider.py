"""Reasoning provider via an OpenAI-compatible LiteLLM proxy."""

from __future__ import annotations

from typing import Any

import httpx

from sleuth.core.exceptions import ModelProviderError
from sleuth.models.chat import ChatReply


class LiteLLMProvider:
    """IModelProvider that POSTs to ``{base_url}/chat/completions``."""

    name = "litellm"

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str | None = None,
        temperature: float = 0.0,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.model = model
        self._temperature = temperature
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"), headers=headers, timeout=timeout, transport=transport,
        )

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> ChatReply:
        body = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.pop("temperature", self._temperature),
            **kwargs,
        }
        try:
            resp = self._client.post("/chat/completions", json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise ModelProviderError(
                f"Provider returned HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise ModelProviderError(f"Provider request failed: {type(exc).__name__}") from exc

        try:
            content = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as exc:
            raise ModelProviderError("Provider response has no message content") from exc
        usage = data.get("usage") if isinstance(data, dict) else None
        return ChatReply(content=str(content), usage=usage if isinstance(usage, dict) else {})

    def close(self) -> None:
        self._client.close()
