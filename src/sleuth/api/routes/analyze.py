"""POST /analyze: inspect one semi-structured file."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from sleuth.agents.inspector import InspectorAgent
from sleuth.api.deps import client_key, get_inspector, get_rate_limiter, get_settings
from sleuth.api.rate_limit import RateLimiter
from sleuth.api.responses import get_request_id, to_json_response
from sleuth.api.validation import (
    parse_analyze_request,
    validate_content_type,
    validate_size,
    validate_token_count,
)
from sleuth.core.config import AppSettings
from sleuth.core.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analyze"])


@router.post("/analyze")
async def analyze(
    request: Request,
    settings: AppSettings = Depends(get_settings),  # noqa: B008
    inspector: InspectorAgent = Depends(get_inspector),  # noqa: B008
    limiter: RateLimiter | None = Depends(get_rate_limiter),  # noqa: B008
) -> JSONResponse:
    """Fingerprint, analyze and normalize one file."""
    request_id = get_request_id(request)
    request.state.request_id = request_id

    if limiter is not None:
        limiter.check(client_key(request))

    validate_size(request.headers.get("content-length"), settings.request)
    validate_content_type(request.headers.get("content-type"))
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        raise InvalidRequestError(
            "Request body is not valid JSON", fix="Send a JSON object body",
        ) from None
    validate_token_count(body, settings.request)
    analyze_request = parse_analyze_request(body, settings.request)

    logger.info(
        "Analyze request request_id=%s file_type=%s length=%d max_errors=%d",
        request_id, analyze_request.file_type, len(analyze_request.content),
        analyze_request.max_errors,
    )
    response = await run_in_threadpool(inspector.analyze, analyze_request, request_id)
    return to_json_response(response, log_max_length=settings.redaction.log_max_length)
