"""Base agent with common dependency wiring and lifecycle patterns."""

from __future__ import annotations

from typing import Any

from sleuth.cache.result_cache import ResultCache
from sleuth.core.config import AppSettings
from sleuth.core.exceptions import CacheError
from sleuth.core.protocols import IModelProvider


class BaseAgent:
    """Common base for Sleuth agents.

    Provides shared dependency injection pattern: model provider, result
    cache and settings are injected at construction time.
    """

    def __init__(
        self,
        *,
        settings: AppSettings,
        model: IModelProvider,
        cache: ResultCache,
    ) -> None:
        self._settings = settings
        self._model = model
        self._cache = cache

    async def health_check(self) -> dict[str, Any]:
        """Return agent health status with the active provider and cache generation."""
        status: dict[str, Any] = {
            "agent": self.__class__.__name__,
            "status": "healthy",
            "environment": self._settings.environment,
            "llm_provider": self._model.name,
            "llm_model": self._model.model,
            "cache_enabled": self._cache.enabled,
        }
        if self._cache.enabled:
            try:
                status["cache_versions"] = self._cache.current_versions()
            except CacheError:
                status["status"] = "degraded"
        return status
