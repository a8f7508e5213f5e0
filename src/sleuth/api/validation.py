"""Inbound request validation for POST /analyze."""

from __future__ import annotations

import json
import math
from typing import Any

from sleuth.core.config import RequestConfig
from sleuth.core.exceptions import InvalidRequestError
from sleuth.models.requests import AnalyzeRequest

ALLOWED_FILE_TYPES = ("auto", "json", "csv", "xml", "yaml")
MAX_ERRORS_LIMIT = 1000


def validate_size(content_length: str | None, config: RequestConfig) -> None:
    if content_length is None:
        return
    try:
        size_mb = int(content_length) / (1024 * 1024)
    except ValueError:
        raise InvalidRequestError("Invalid Content-Length header") from None
    if size_mb > config.max_request_size_mb:
        raise InvalidRequestError(
            f"Request too large: {size_mb:.2f}MB exceeds limit of {config.max_request_size_mb}MB",
            fix="Split your request or reduce the content size",
            status_code=413,
        )


def validate_content_type(content_type: str | None, expected: tuple[str, ...] = ("application/json",)) -> None:
    if not content_type:
        raise InvalidRequestError(
            "Missing Content-Type header. Expected: application/json",
            fix="Send the body as JSON with Content-Type: application/json",
            status_code=415,
        )
    if not any(t in content_type for t in expected):
        raise InvalidRequestError(
            f"Invalid Content-Type: {content_type}. Expected: {', '.join(expected)}",
            fix="Send the body as JSON with Content-Type: application/json",
            status_code=415,
        )


def validate_token_count(body: Any, config: RequestConfig) -> None:
    """Rough estimate: one token per four characters of serialized body."""
    estimated = math.ceil(len(json.dumps(body)) / 4)
    if estimated > config.max_tokens_per_request:
        raise InvalidRequestError(
            f"Content too large: ~{estimated} tokens exceeds limit of {config.max_tokens_per_request}",
            fix="Reduce content size",
            status_code=413,
        )


def parse_analyze_request(body: Any, config: RequestConfig) -> AnalyzeRequest:
    """Validate a decoded JSON body into an AnalyzeRequest."""
    if not isinstance(body, dict):
        raise InvalidRequestError(
            "Request body is missing or invalid",
            fix='Send a JSON body with required fields: { content: "..." }',
        )

    content = body.get("content")
    if content is None or content == "":
        raise InvalidRequestError(
            "Missing required field: content",
            fix='Add "content" field with the file content to analyze',
        )
    if not isinstance(content, str):
        raise InvalidRequestError(
            "Invalid field type: content must be a string",
            fix='Ensure "content" is a string, not an object or array',
        )
    if not content.strip():
        raise InvalidRequestError(
            "Invalid field value: content cannot be empty",
            fix="Provide non-empty content to analyze",
        )

    file_type = body.get("file_type", "auto")
    if not isinstance(file_type, str) or file_type not in ALLOWED_FILE_TYPES:
        raise InvalidRequestError(
            f'Invalid file_type: "{file_type}"',
            fix=f'Allowed values are: {", ".join(ALLOWED_FILE_TYPES)}. Use "auto" for automatic detection.',
        )

    file_name = body.get("file_name")
    if file_name is not None and not isinstance(file_name, str):
        raise InvalidRequestError(
            "Invalid field type: file_name must be a string",
            fix='Provide a valid filename string, e.g., "data.json"',
        )

    max_errors = body.get("max_errors", config.default_max_errors)
    if not isinstance(max_errors, int) or isinstance(max_errors, bool):
        raise InvalidRequestError(
            "Invalid field type: max_errors must be an integer",
            fix="Use a positive integer, e.g., max_errors: 10",
        )
    if not 1 <= max_errors <= MAX_ERRORS_LIMIT:
        raise InvalidRequestError(
            f"Invalid field value: max_errors must be between 1 and {MAX_ERRORS_LIMIT}",
            fix=f"Use an integer from 1 to {MAX_ERRORS_LIMIT}",
        )

    return AnalyzeRequest(
        content=content, file_type=file_type, file_name=file_name, max_errors=max_errors,
    )
