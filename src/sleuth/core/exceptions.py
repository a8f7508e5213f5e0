"""Sleuth exception hierarchy."""

from __future__ import annotations


class SleuthError(Exception):
    """Base exception for all Sleuth errors."""

    status_code = 500
    error_type = "internal_error"


class InvalidRequestError(SleuthError):
    """Malformed request or administrative command."""

    status_code = 400
    error_type = "validation_error"

    def __init__(self, message: str, fix: str | None = None, status_code: int | None = None) -> None:
        self.message = message
        self.fix = fix
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class UnauthorizedError(SleuthError):
    """Missing or wrong shared-secret credential."""

    status_code = 401
    error_type = "unauthorized"


class RateLimitExceededError(SleuthError):
    """Client exhausted its request window."""

    status_code = 429
    error_type = "rate_limit_exceeded"

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded, retry after {retry_after}s")


class CacheError(SleuthError):
    """Cache store operation failed."""

    status_code = 503
    error_type = "cache_unavailable"


class ModelProviderError(SleuthError):
    """Reasoning provider call failed at the transport level."""

    status_code = 502
    error_type = "llm_provider_error"
