"""Serialize canonical responses with their transport-level headers."""

from __future__ import annotations

import logging
import uuid

from fastapi import Request
from fastapi.responses import JSONResponse

from sleuth.analysis.redaction import LOG_MAX_LENGTH, redact
from sleuth.models.responses import ErrorResponse, NormalizedResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id(request: Request) -> str:
    """Echo a caller-supplied correlation id, or mint one."""
    supplied = request.headers.get(REQUEST_ID_HEADER, "").strip()
    return supplied[:128] if supplied else str(uuid.uuid4())


def to_json_response(
    response: NormalizedResponse,
    status_code: int = 200,
    log_max_length: int = LOG_MAX_LENGTH,
) -> JSONResponse:
    """Body is the model payload; headers mirror request_id, cache and retry hints."""
    headers = {REQUEST_ID_HEADER: response.request_id}
    if getattr(response, "cached", False):
        headers["X-Cache-Status"] = "HIT"
    if isinstance(response, ErrorResponse):
        if response.retry_after is not None:
            headers["Retry-After"] = str(response.retry_after)
        logger.warning(
            "[Response] %d %s: %s", status_code, response.error_type, redact(response.message, log_max_length),
        )
    else:
        logger.info(
            "[Response] %s - %d errors, %dms",
            response.status, response.total_errors, response.analysis_time_ms,
        )
    return JSONResponse(status_code=status_code, content=response.to_payload(), headers=headers)
