"""Canonical error record produced by the error normalizer."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorCategory(StrEnum):
    # Declaration order is the keyword-matching priority.
    SYNTAX = "syntax"
    STRUCTURE = "structure"
    SEMANTIC = "semantic"
    VALIDATION = "validation"
    WARNING = "warning"


class Severity(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SuggestionSafety(StrEnum):
    SAFE = "safe"
    RISKY = "risky"
    DANGEROUS = "dangerous"


class Suggestion(BaseModel):
    """A proposed fix for a detected error."""

    model_config = ConfigDict(frozen=True)

    text: str
    safety: SuggestionSafety = SuggestionSafety.SAFE
    confidence: Optional[float] = None


class NormalizedError(BaseModel):
    """Single typed, severity-ranked error. ``None`` locators mean unknown."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: ErrorCategory
    severity: Severity
    message: str
    line: Optional[int] = None
    column: Optional[int] = None
    position: Optional[int] = None
    explanation: Optional[str] = None
    confidence: Optional[float] = None
    snippet: Optional[str] = None
    suggestions: tuple[Suggestion, ...] = Field(default_factory=tuple)

    @property
    def is_warning(self) -> bool:
        return self.type is ErrorCategory.WARNING
