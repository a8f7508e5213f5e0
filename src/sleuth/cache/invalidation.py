"""Invalidation Controller — administrative cache clear / version-bump commands.

The controller validates commands and delegates the actual mutation to the
result cache and its storage backend. When no shared secret is configured
the commands are open to anyone who can reach the endpoint.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any, Literal, Optional

from pydantic import BaseModel

from sleuth.analysis.redaction import LOG_MAX_LENGTH, redact
from sleuth.cache.result_cache import ResultCache
from sleuth.core.exceptions import InvalidRequestError, UnauthorizedError
from sleuth.core.types import FILE_TYPES, VERSION_KINDS

logger = logging.getLogger(__name__)


class VersionUpdate(BaseModel):
    type: str
    version: str


class InvalidationResult(BaseModel):
    """Outcome of a successful invalidation command."""

    success: bool = True
    scope: Literal["all", "file_type", "version"]
    request_id: str
    deleted_entries: Optional[int] = None
    file_type: Optional[str] = None
    version_updated: Optional[VersionUpdate] = None


class InvalidationController:
    """Validates and executes ``scope`` = all | file_type | version commands."""

    def __init__(
        self,
        cache: ResultCache,
        admin_api_key: str | None = None,
        log_max_length: int = LOG_MAX_LENGTH,
    ) -> None:
        self._cache = cache
        self._admin_api_key = admin_api_key
        self._log_max_length = log_max_length

    @property
    def is_open(self) -> bool:
        return not self._admin_api_key

    def authorize(self, provided_key: str | None) -> None:
        """Raise UnauthorizedError unless the shared secret matches (if set)."""
        if self.is_open:
            return
        if not provided_key or not hmac.compare_digest(
            provided_key.encode(), self._admin_api_key.encode()
        ):
            raise UnauthorizedError("Unauthorized")

    def execute(self, payload: Any, request_id: str) -> InvalidationResult:
        if not isinstance(payload, dict):
            raise InvalidRequestError(
                "Invalid request body",
                fix='Send JSON body with { scope: "all" | "file_type" | "version", ... }',
            )

        scope = payload.get("scope")
        if not scope:
            raise InvalidRequestError(
                "Missing required field: scope",
                fix='Specify scope: "all", "file_type", or "version"',
            )

        if scope == "all":
            deleted = self._cache.invalidate_all()
            logger.info("All cache invalidated request_id=%s deleted_entries=%d", request_id, deleted)
            return InvalidationResult(scope="all", deleted_entries=deleted, request_id=request_id)

        if scope == "file_type":
            return self._invalidate_file_type(payload.get("file_type"), request_id)

        if scope == "version":
            return self._bump_version(payload.get("type"), payload.get("version"), request_id)

        raise InvalidRequestError(
            f"Invalid scope: {scope}",
            fix='Use scope: "all", "file_type", or "version"',
        )

    def _invalidate_file_type(self, file_type: Any, request_id: str) -> InvalidationResult:
        if not file_type:
            raise InvalidRequestError(
                "Missing required field: file_type",
                fix='Specify file_type: "json", "csv", "xml", or "yaml"',
            )
        if file_type not in FILE_TYPES:
            raise InvalidRequestError(
                f"Invalid file_type: {file_type}",
                fix=f"Use one of: {', '.join(FILE_TYPES)}",
            )

        deleted = self._cache.invalidate_file_type(file_type)
        logger.info(
            "Cache invalidated by file type request_id=%s file_type=%s deleted_entries=%d",
            request_id, file_type, deleted,
        )
        return InvalidationResult(
            scope="file_type", file_type=file_type, deleted_entries=deleted, request_id=request_id,
        )

    def _bump_version(self, kind: Any, version: Any, request_id: str) -> InvalidationResult:
        if not kind or not version or not str(version).strip():
            raise InvalidRequestError(
                "Missing required fields: type and version",
                fix='Specify type: "model"|"rag" and version: "..."',
            )
        if kind not in VERSION_KINDS:
            raise InvalidRequestError(f"Invalid type: {kind}", fix='Use type: "model" or "rag"')

        version = str(version)
        self._cache.update_version(kind, version)
        logger.info(
            "Version updated (cache will invalidate) request_id=%s type=%s version=%s",
            request_id, kind, redact(version, self._log_max_length),
        )
        return InvalidationResult(
            scope="version",
            version_updated=VersionUpdate(type=kind, version=version),
            request_id=request_id,
        )
