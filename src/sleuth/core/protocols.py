"""Protocol interfaces for the external collaborators Sleuth talks to.

All inter-layer communication uses these Protocols: structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from sleuth.models.chat import ChatReply


# ---------------------------------------------------------------------------
# Reasoning Provider
# ---------------------------------------------------------------------------

@runtime_checkable
class IModelProvider(Protocol):
    """Abstraction over the external reasoning step (mock, LiteLLM proxy)."""

    name: str
    model: str

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> ChatReply: ...


# ---------------------------------------------------------------------------
# Persistence: Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def ping(self) -> bool: ...

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def delete_prefix(self, prefix: str) -> int: ...

    def hgetall(self, key: str) -> dict[str, str]: ...

    def hset(self, key: str, field: str, value: str) -> None: ...

    def hincrby(self, key: str, field: str, amount: int = 1) -> int: ...
