"""Shared test doubles — re-export in-memory backend and mock provider."""

from __future__ import annotations

from sleuth.model_providers.mock_provider import MockModelProvider
from sleuth.persistence.memory_backend import MemoryCacheBackend

__all__ = ["MemoryCacheBackend", "MockModelProvider"]
