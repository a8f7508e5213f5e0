"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sleuth.agents.inspector import InspectorAgent
from sleuth.analysis.redaction import redact
from sleuth.analysis.responses import build_error_response, build_rate_limit_response
from sleuth.api.rate_limit import RateLimiter
from sleuth.api.responses import get_request_id, to_json_response
from sleuth.api.routes import admin, analyze, health
from sleuth.cache.invalidation import InvalidationController
from sleuth.cache.result_cache import ResultCache
from sleuth.core.config import AppSettings
from sleuth.core.exceptions import RateLimitExceededError, SleuthError
from sleuth.core.protocols import ICacheBackend, IModelProvider
from sleuth.model_providers import create_model_provider
from sleuth.models.responses import FailureType
from sleuth.persistence import create_cache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize and tear down application resources."""
    settings: AppSettings = app.state.settings
    logger.info(
        "Sleuth starting environment=%s llm=%s cache=%s",
        settings.environment, settings.llm.provider, settings.cache.backend,
    )
    yield
    close = getattr(app.state.model_provider, "close", None)
    if callable(close):
        close()


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id(request)


async def _handle_sleuth_error(request: Request, exc: SleuthError) -> JSONResponse:
    request_id = _request_id(request)
    if isinstance(exc, RateLimitExceededError):
        response = build_rate_limit_response(
            request_id=request_id,
            retry_after=exc.retry_after,
            default_retry_after=request.app.state.settings.response.default_retry_after,
        )
    else:
        response = build_error_response(
            request_id=request_id,
            error_type=exc.error_type,
            message=getattr(exc, "message", None) or str(exc) or "Request failed",
            fix=getattr(exc, "fix", None),
            details_max_length=request.app.state.settings.redaction.details_max_length,
        )
    return to_json_response(
        response,
        status_code=exc.status_code,
        log_max_length=request.app.state.settings.redaction.log_max_length,
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    redaction = request.app.state.settings.redaction
    logger.error(
        "Unhandled error request_id=%s %s: %s",
        request_id, type(exc).__name__, redact(str(exc), redaction.log_max_length),
    )
    response = build_error_response(
        request_id=request_id,
        error_type=FailureType.INTERNAL_ERROR,
        message="Internal server error",
        details=f"{type(exc).__name__}: {exc}",
        details_max_length=redaction.details_max_length,
    )
    return to_json_response(response, status_code=500, log_max_length=redaction.log_max_length)


def create_app(
    settings: AppSettings | None = None,
    *,
    cache_backend: ICacheBackend | None = None,
    model_provider: IModelProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or AppSettings()
    if cache_backend is None:
        cache_backend = create_cache(settings)
    if model_provider is None:
        model_provider = create_model_provider(settings.llm)

    result_cache = ResultCache(cache_backend, settings.cache)
    invalidation = InvalidationController(
        result_cache,
        admin_api_key=settings.admin.api_key,
        log_max_length=settings.redaction.log_max_length,
    )
    if invalidation.is_open:
        logger.warning("SLEUTH_ADMIN_API_KEY not set; admin cache endpoints are unauthenticated")

    app = FastAPI(
        title="Sleuth File Inspection Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cache_backend = cache_backend
    app.state.model_provider = model_provider
    app.state.result_cache = result_cache
    app.state.invalidation = invalidation
    app.state.inspector = InspectorAgent(settings=settings, model=model_provider, cache=result_cache)
    app.state.rate_limiter = (
        RateLimiter(
            limit=settings.rate_limit.requests_per_window,
            window_seconds=settings.rate_limit.window_seconds,
        )
        if settings.rate_limit.enabled
        else None
    )

    app.add_exception_handler(SleuthError, _handle_sleuth_error)
    app.add_exception_handler(Exception, _handle_unexpected)
    app.include_router(health.router)
    app.include_router(analyze.router)
    app.include_router(admin.router, prefix="/admin")
    return app


def main() -> None:
    import uvicorn

    settings = AppSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)
