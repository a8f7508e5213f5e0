"""Reply returned by a reasoning provider for one chat call."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatReply(BaseModel):
    """Message content plus the usage block reported for that same call."""

    model_config = ConfigDict(frozen=True)

    content: str = ""
    usage: dict[str, Any] = Field(default_factory=dict)

    @property
    def total_tokens(self) -> int | None:
        value = self.usage.get("total_tokens")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None
