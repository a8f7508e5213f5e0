"""Pluggable cache backends behind the ICacheBackend Protocol."""

from __future__ import annotations

import logging

from sleuth.core.config import AppSettings
from sleuth.core.protocols import ICacheBackend
from sleuth.persistence.memory_backend import MemoryCacheBackend
from sleuth.persistence.redis_backend import RedisCacheBackend

logger = logging.getLogger(__name__)


def create_cache(settings: AppSettings | None = None) -> ICacheBackend:
    """Create the cache backend selected by application settings."""
    if settings is None:
        settings = AppSettings()

    if settings.cache.backend == "redis":
        logger.info(
            "Using Redis cache backend at %s:%d/%d",
            settings.redis.host, settings.redis.port, settings.redis.db,
        )
        return RedisCacheBackend(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
        )

    logger.info("Redis not configured, using in-memory cache backend")
    return MemoryCacheBackend()
