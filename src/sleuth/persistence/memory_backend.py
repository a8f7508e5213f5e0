"""In-memory ICacheBackend, used when Redis is not configured and in tests."""

from __future__ import annotations

import threading
import time


class MemoryCacheBackend:
    """Dict-backed ICacheBackend honouring TTLs lazily on read."""

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, float | None]] = {}
        self._hashes: dict[str, dict[str, str]] = {}
        self._lock = threading.Lock()

    def ping(self) -> bool:
        return True

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= time.monotonic():
                del self._store[key]
                return None
            return value

    def setex(self, key: str, ttl: int, value: str) -> None:
        with self._lock:
            self._store[key] = (value, time.monotonic() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)
            self._hashes.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [k for k in self._store if k.startswith(prefix)]
            doomed_hashes = [k for k in self._hashes if k.startswith(prefix)]
            for key in doomed:
                del self._store[key]
            for key in doomed_hashes:
                del self._hashes[key]
            return len(doomed) + len(doomed_hashes)

    def hgetall(self, key: str) -> dict[str, str]:
        with self._lock:
            return dict(self._hashes.get(key, {}))

    def hset(self, key: str, field: str, value: str) -> None:
        with self._lock:
            self._hashes.setdefault(key, {})[field] = value

    def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        with self._lock:
            fields = self._hashes.setdefault(key, {})
            fields[field] = str(int(fields.get(field, "0")) + amount)
            return int(fields[field])

    def __len__(self) -> int:
        return len(self._store)
