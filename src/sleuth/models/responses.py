"""The three canonical response shapes serialized to callers."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from sleuth.models.errors import NormalizedError


class FailureType(StrEnum):
    """Taxonomy tags for the error variant (not exception class names)."""

    VALIDATION_ERROR = "validation_error"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    LLM_PROVIDER_ERROR = "llm_provider_error"
    CACHE_UNAVAILABLE = "cache_unavailable"
    INTERNAL_ERROR = "internal_error"


class SanityChecks(BaseModel):
    model_config = ConfigDict(frozen=True)

    passed: int = 0
    failed: int = 0


class _BaseResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_id: str

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready body with unset optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class SuccessResponse(_BaseResponse):
    """Analysis completed and the upstream output was interpreted."""

    status: Literal["ok"] = "ok"
    file_type: str
    truncated: bool
    total_errors: int
    total_warnings: int
    errors: tuple[NormalizedError, ...] = Field(default_factory=tuple)
    analysis_time_ms: int
    cached: bool = False
    content_hash: Optional[str] = None
    llm_provider: Optional[str] = None
    llm_model: Optional[str] = None
    tokens_used: Optional[int] = None
    parser_hints: Optional[tuple[dict[str, Any], ...]] = None
    rag_used: bool = False
    sanity_checks: Optional[SanityChecks] = None
    raw_llm_output: Optional[str] = None


class ParseErrorResponse(_BaseResponse):
    """Upstream answered but its output could not be read as a result."""

    status: Literal["llm_parse_error"] = "llm_parse_error"
    file_type: str
    truncated: bool
    total_errors: Literal[0] = 0
    total_warnings: Literal[0] = 0
    errors: tuple[NormalizedError, ...] = ()
    analysis_time_ms: int
    cached: Literal[False] = False
    raw_llm_output: str
    parser_hints: Optional[tuple[dict[str, Any], ...]] = None
    error_message: Optional[str] = None


class ErrorResponse(_BaseResponse):
    """Transport, validation, throttling or server failure."""

    status: Literal["error"] = "error"
    error_type: str
    message: str
    details: Optional[str] = None
    fix: Optional[str] = None
    suggestions: Optional[tuple[str, ...]] = None
    retry_after: Optional[int] = None


NormalizedResponse = SuccessResponse | ParseErrorResponse | ErrorResponse
