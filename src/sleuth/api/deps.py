"""Dependency providers for FastAPI; services are wired onto ``app.state``."""

from __future__ import annotations

from fastapi import Request

from sleuth.agents.inspector import InspectorAgent
from sleuth.api.rate_limit import RateLimiter
from sleuth.cache.invalidation import InvalidationController
from sleuth.cache.result_cache import ResultCache
from sleuth.core.config import AppSettings


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_result_cache(request: Request) -> ResultCache:
    return request.app.state.result_cache


def get_invalidation_controller(request: Request) -> InvalidationController:
    return request.app.state.invalidation


def get_inspector(request: Request) -> InspectorAgent:
    return request.app.state.inspector


def get_rate_limiter(request: Request) -> RateLimiter | None:
    return request.app.state.rate_limiter


def client_key(request: Request) -> str:
    """Rate-limit identity: first X-Forwarded-For hop, else peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"
