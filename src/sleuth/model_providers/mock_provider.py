"""Mock reasoning provider for local development and testing.

Returns canned responses. No real LLM calls.
"""

from __future__ import annotations

import json
from typing import Any

from sleuth.models.chat import ChatReply

_EMPTY_RESULT = json.dumps({"errors": []})


class MockModelProvider:
    """IModelProvider implementation that returns deterministic mock responses."""

    name = "mock"

    def __init__(self, default_response: str = _EMPTY_RESULT, model: str = "mock-model") -> None:
        self.model = model
        self._default_response = default_response
        self._canned_responses: dict[str, str] = {}
        self.calls: list[list[dict[str, str]]] = []

    def set_response(self, prompt_contains: str, response: str) -> None:
        """Register a canned response for prompts containing a keyword."""
        self._canned_responses[prompt_contains] = response

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> ChatReply:
        self.calls.append(messages)
        last_content = messages[-1].get("content", "") if messages else ""
        for keyword, response in self._canned_responses.items():
            if keyword in last_content:
                return ChatReply(content=response)
        return ChatReply(content=self._default_response)
