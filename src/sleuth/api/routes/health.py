"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from sleuth.agents.inspector import InspectorAgent
from sleuth.api.deps import get_inspector
from sleuth.core.exceptions import CacheError

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(
    request: Request,
    inspector: InspectorAgent = Depends(get_inspector),  # noqa: B008
) -> dict:
    agent = await inspector.health_check()
    try:
        cache_ok = request.app.state.cache_backend.ping()
    except CacheError:
        cache_ok = False
    return {"status": "ready" if cache_ok else "degraded", "cache": cache_ok, "agent": agent}
