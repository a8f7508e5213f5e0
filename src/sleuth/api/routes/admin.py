"""Admin endpoints for cache invalidation and statistics."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, Response

from sleuth.api.deps import (
    client_key,
    get_invalidation_controller,
    get_result_cache,
    get_settings,
)
from sleuth.api.responses import REQUEST_ID_HEADER, get_request_id
from sleuth.cache.invalidation import InvalidationController
from sleuth.cache.result_cache import ResultCache
from sleuth.core.config import AppSettings
from sleuth.core.exceptions import InvalidRequestError, UnauthorizedError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


def _provided_key(request: Request) -> str | None:
    key = request.headers.get("x-api-key")
    if key:
        return key
    auth = request.headers.get("authorization", "")
    return auth.removeprefix("Bearer ").strip() or None


def require_admin(
    request: Request,
    controller: InvalidationController = Depends(get_invalidation_controller),  # noqa: B008
) -> None:
    request.state.request_id = get_request_id(request)
    try:
        controller.authorize(_provided_key(request))
    except UnauthorizedError:
        logger.warning(
            "Unauthorized admin attempt request_id=%s client=%s",
            request.state.request_id, client_key(request),
        )
        raise


@router.post("/cache/invalidate", dependencies=[Depends(require_admin)])
async def invalidate_cache(
    request: Request,
    response: Response,
    controller: InvalidationController = Depends(get_invalidation_controller),  # noqa: B008
) -> dict:
    """Clear cached results by scope, or bump the model/RAG generation."""
    request_id = request.state.request_id
    response.headers[REQUEST_ID_HEADER] = request_id
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        raise InvalidRequestError(
            "Invalid request body",
            fix='Send JSON body with { scope: "all" | "file_type" | "version", ... }',
        ) from None

    result = controller.execute(payload, request_id)
    return result.model_dump(exclude_none=True)


@router.get("/cache/stats", dependencies=[Depends(require_admin)])
async def cache_stats(
    cache: ResultCache = Depends(get_result_cache),  # noqa: B008
    settings: AppSettings = Depends(get_settings),  # noqa: B008
) -> dict:
    """Hit/miss counters and current cache generation."""
    stats = cache.stats()
    stats["hit_rate_percentage"] = f"{stats['hit_rate'] * 100:.2f}%"
    return {
        "cache_enabled": cache.enabled,
        "stats": stats,
        "storage": {"backend": settings.cache.backend, "ttl_seconds": cache.ttl_seconds},
        "versions": cache.current_versions(),
    }
