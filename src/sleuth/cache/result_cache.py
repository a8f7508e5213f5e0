"""Content-addressed cache of analysis results with generation-based invalidation.

Entries are keyed by file type, a short SHA-256 content hash and
``max_errors``. Each entry records the model and grounding (RAG) versions it
was produced under; bumping either version turns every older entry into a
miss on its next lookup without deleting anything eagerly.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any

from sleuth.core.config import CacheConfig
from sleuth.core.exceptions import CacheError
from sleuth.core.protocols import ICacheBackend
from sleuth.core.types import VersionKind

logger = logging.getLogger(__name__)

_STAT_FIELDS = ("hits", "misses", "invalidations", "total_requests")


def compute_content_hash(content: str) -> str:
    """First 16 hex chars of the SHA-256 of ``content``."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]


class ResultCache:
    """Versioned analysis-result cache on top of an ICacheBackend."""

    def __init__(self, backend: ICacheBackend, config: CacheConfig | None = None) -> None:
        self._backend = backend
        self._config = config or CacheConfig()
        prefix = self._config.key_prefix
        self._entries_prefix = f"{prefix}entries:"
        self._versions_key = f"{prefix}versions"
        self._stats_key = f"{prefix}stats"

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def ttl_seconds(self) -> int:
        return self._config.ttl_seconds

    def cache_key(self, content_hash: str, max_errors: int, file_type: str) -> str:
        return f"{self._entries_prefix}{file_type}:{content_hash}:{max_errors}"

    # ---- versions ----

    def current_versions(self) -> dict[str, str]:
        stored = self._backend.hgetall(self._versions_key)
        return {
            "model_version": stored.get("model_version") or self._config.model_version,
            "rag_version": stored.get("rag_version") or self._config.rag_version,
        }

    def update_version(self, kind: VersionKind, version: str) -> None:
        """Record a new generation; older entries become misses on lookup."""
        self._backend.hset(self._versions_key, f"{kind}_version", version)
        logger.debug("Stored new %s generation", kind)

    # ---- lookup / store ----

    def _count(self, stat: str) -> None:
        try:
            self._backend.hincrby(self._stats_key, stat, 1)
        except CacheError as exc:
            logger.warning("Cache stats increment failed: %s", exc)

    def lookup(self, content: str, max_errors: int, file_type: str, request_id: str) -> dict[str, Any] | None:
        """Return the cached response payload, or None on miss/failure."""
        if not self.enabled:
            return None

        key = self.cache_key(compute_content_hash(content), max_errors, file_type)
        try:
            self._count("total_requests")
            raw = self._backend.get(key)
            if raw is None:
                logger.debug("Cache miss request_id=%s key=%s", request_id, key)
                self._count("misses")
                return None

            entry = json.loads(raw)
            current = self.current_versions()
            if (
                entry.get("model_version") != current["model_version"]
                or entry.get("rag_version") != current["rag_version"]
            ):
                logger.info(
                    "Cache entry stale request_id=%s cached=%s/%s current=%s/%s",
                    request_id, entry.get("model_version"), entry.get("rag_version"),
                    current["model_version"], current["rag_version"],
                )
                self._backend.delete(key)
                self._count("invalidations")
                self._count("misses")
                return None

            age = int(time.time() - entry.get("created_at", 0))
            logger.info(
                "Cache hit request_id=%s key=%s age_seconds=%d original_request_id=%s",
                request_id, key, age, entry.get("request_id"),
            )
            self._count("hits")
            return entry["response"]
        except (CacheError, ValueError, KeyError, TypeError) as exc:
            logger.error("Cache lookup failed request_id=%s: %s", request_id, type(exc).__name__)
            return None

    def store(
        self,
        content: str,
        max_errors: int,
        file_type: str,
        response: dict[str, Any],
        request_id: str,
        model: str = "",
    ) -> None:
        """Store a response payload under the current generation."""
        if not self.enabled:
            return

        content_hash = compute_content_hash(content)
        key = self.cache_key(content_hash, max_errors, file_type)
        try:
            versions = self.current_versions()
            entry = {
                "request_id": request_id,
                "cache_key": {
                    "content_hash": content_hash,
                    "max_errors": max_errors,
                    "file_type": file_type,
                },
                "response": response,
                "model": model,
                "model_version": versions["model_version"],
                "rag_version": versions["rag_version"],
                "created_at": time.time(),
                "ttl_seconds": self.ttl_seconds,
            }
            self._backend.setex(key, self.ttl_seconds, json.dumps(entry))
            logger.info("Analysis result cached request_id=%s key=%s", request_id, key)
        except CacheError as exc:
            logger.error("Failed to cache analysis result request_id=%s: %s", request_id, exc)

    # ---- invalidation ----

    def invalidate_all(self) -> int:
        deleted = self._backend.delete_prefix(self._entries_prefix)
        logger.info("All cache entries invalidated: deleted=%d", deleted)
        return deleted

    def invalidate_file_type(self, file_type: str) -> int:
        deleted = self._backend.delete_prefix(f"{self._entries_prefix}{file_type}:")
        logger.info("Cache entries invalidated for file_type=%s: deleted=%d", file_type, deleted)
        return deleted

    # ---- stats ----

    def stats(self) -> dict[str, Any]:
        raw = self._backend.hgetall(self._stats_key)
        counts = {name: int(raw.get(name, 0)) for name in _STAT_FIELDS}
        looked_up = counts["hits"] + counts["misses"]
        counts["hit_rate"] = counts["hits"] / looked_up if looked_up else 0.0
        return counts

    def reset_stats(self) -> None:
        self._backend.delete(self._stats_key)
        logger.info("Cache stats reset")
