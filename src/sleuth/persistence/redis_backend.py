"""Redis cache backend implementing ICacheBackend."""

from __future__ import annotations

import redis

from sleuth.core.exceptions import CacheError


class RedisCacheBackend:
    """Production ICacheBackend backed by Redis."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0) -> None:
        self._host = host
        self._port = port
        self._db = db
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except Exception as exc:
            raise CacheError(f"Redis PING failed: {exc}") from exc

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except Exception as exc:
            raise CacheError(f"Redis GET failed for key={key!r}: {exc}") from exc

    def setex(self, key: str, ttl: int, value: str) -> None:
        try:
            self._client.setex(key, ttl, value)
        except Exception as exc:
            raise CacheError(f"Redis SETEX failed for key={key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except Exception as exc:
            raise CacheError(f"Redis DELETE failed for key={key!r}: {exc}") from exc

    def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``; SCAN-based, not KEYS."""
        try:
            deleted = 0
            batch: list[str] = []
            for key in self._client.scan_iter(match=f"{prefix}*", count=500):
                batch.append(key)
                if len(batch) >= 500:
                    deleted += self._client.delete(*batch)
                    batch.clear()
            if batch:
                deleted += self._client.delete(*batch)
            return deleted
        except Exception as exc:
            raise CacheError(f"Redis prefix delete failed for prefix={prefix!r}: {exc}") from exc

    def hgetall(self, key: str) -> dict[str, str]:
        try:
            return dict(self._client.hgetall(key))
        except Exception as exc:
            raise CacheError(f"Redis HGETALL failed for key={key!r}: {exc}") from exc

    def hset(self, key: str, field: str, value: str) -> None:
        try:
            self._client.hset(key, field, value)
        except Exception as exc:
            raise CacheError(f"Redis HSET failed for key={key!r}: {exc}") from exc

    def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        try:
            return int(self._client.hincrby(key, field, amount))
        except Exception as exc:
            raise CacheError(f"Redis HINCRBY failed for key={key!r}: {exc}") from exc
