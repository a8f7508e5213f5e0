"""Response Builder — constructs the canonical response variants.

Every builder is pure and total: it returns a fully-formed, immutable
response model and never mutates its inputs.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sleuth.analysis.normalizer import normalize_errors
from sleuth.analysis.redaction import DETAILS_MAX_LENGTH, redact
from sleuth.models.responses import (
    ErrorResponse,
    FailureType,
    ParseErrorResponse,
    SanityChecks,
    SuccessResponse,
)

DEFAULT_RETRY_AFTER = 60  # seconds

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


def _hints(parser_hints: Iterable[dict[str, Any]] | None) -> tuple[dict[str, Any], ...] | None:
    return tuple(parser_hints) if parser_hints is not None else None


def build_success_response(
    *,
    request_id: str,
    file_type: str,
    errors: Sequence[Any],
    analysis_time_ms: float,
    truncated: bool = False,
    cached: bool = False,
    content_hash: str | None = None,
    llm_provider: str | None = None,
    llm_model: str | None = None,
    tokens_used: int | None = None,
    parser_hints: Iterable[dict[str, Any]] | None = None,
    rag_snippets_used: int = 0,
    sanity_checks_passed: int | None = None,
    sanity_checks_failed: int | None = None,
    raw_llm_output: str | None = None,
    include_raw_output: bool = False,
) -> SuccessResponse:
    """Normalize ``errors`` and wrap them with counts and provenance.

    Counts come from the normalized list. ``raw_llm_output`` is dropped
    entirely unless ``include_raw_output`` is set (non-production only).
    """
    normalized = normalize_errors(errors)
    warnings = sum(1 for e in normalized if e.is_warning)

    sanity = None
    if sanity_checks_passed is not None or sanity_checks_failed is not None:
        sanity = SanityChecks(passed=sanity_checks_passed or 0, failed=sanity_checks_failed or 0)

    return SuccessResponse(
        request_id=request_id,
        file_type=file_type,
        truncated=truncated,
        total_errors=len(normalized) - warnings,
        total_warnings=warnings,
        errors=tuple(normalized),
        analysis_time_ms=max(0, round(analysis_time_ms)),
        cached=cached,
        content_hash=content_hash,
        llm_provider=llm_provider,
        llm_model=llm_model,
        tokens_used=tokens_used,
        parser_hints=_hints(parser_hints),
        rag_used=rag_snippets_used > 0,
        sanity_checks=sanity,
        raw_llm_output=raw_llm_output if include_raw_output else None,
    )


def build_parse_error_response(
    *,
    request_id: str,
    file_type: str,
    raw_llm_output: str,
    analysis_time_ms: float,
    truncated: bool = False,
    parser_hints: Iterable[dict[str, Any]] | None = None,
    error_message: str | None = None,
) -> ParseErrorResponse:
    """Upstream responded with something that is not a result."""
    return ParseErrorResponse(
        request_id=request_id,
        file_type=file_type,
        truncated=truncated,
        analysis_time_ms=max(0, round(analysis_time_ms)),
        raw_llm_output=raw_llm_output,
        parser_hints=_hints(parser_hints),
        error_message=error_message,
    )


def build_error_response(
    *,
    request_id: str,
    error_type: str,
    message: str,
    details: str | None = None,
    fix: str | None = None,
    suggestions: Sequence[str] | None = None,
    retry_after: int | None = None,
    details_max_length: int = DETAILS_MAX_LENGTH,
) -> ErrorResponse:
    """Error variant; free-text ``details`` always pass through redaction."""
    return ErrorResponse(
        request_id=request_id,
        error_type=str(error_type),
        message=message,
        details=redact(details, details_max_length) if details else None,
        fix=fix,
        suggestions=tuple(str(s) for s in suggestions) if suggestions is not None else None,
        retry_after=retry_after,
    )


def build_rate_limit_response(
    *,
    request_id: str,
    retry_after: int | None = None,
    default_retry_after: int = DEFAULT_RETRY_AFTER,
) -> ErrorResponse:
    """Throttling variant with a fixed tag and message."""
    wait = retry_after if retry_after is not None else default_retry_after
    return build_error_response(
        request_id=request_id,
        error_type=FailureType.RATE_LIMIT_EXCEEDED,
        message=RATE_LIMIT_MESSAGE,
        details=(
            f"You have exceeded the rate limit. Please wait {wait} seconds "
            "before making another request."
        ),
        suggestions=[
            f"Wait {wait} seconds before retrying",
            "Consider implementing client-side rate limiting",
            "Contact support if you need higher rate limits",
        ],
        retry_after=wait,
    )
