"""Error Normalizer — maps loosely-typed upstream error records to NormalizedError."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from sleuth.models.errors import (
    ErrorCategory,
    NormalizedError,
    Severity,
    Suggestion,
    SuggestionSafety,
)

_POSITION = re.compile(r"(?:at )?position\s+(\d+)", re.IGNORECASE)
_LINE_COLUMN = re.compile(r"line\s+(\d+)[,\s]+column\s+(\d+)", re.IGNORECASE)
_LINE = re.compile(r"(?:at )?line\s+(\d+)", re.IGNORECASE)
_COLUMN = re.compile(r"column\s+(\d+)", re.IGNORECASE)

# First match wins, in this order.
_SEVERITY_KEYWORDS: tuple[tuple[tuple[str, ...], Severity], ...] = (
    (("critical", "fatal"), Severity.CRITICAL),
    (("warning",), Severity.LOW),
    (("syntax", "invalid", "unexpected"), Severity.HIGH),
)
_SEVERITIES = frozenset(s.value for s in Severity)
_SAFETIES = frozenset(s.value for s in SuggestionSafety)


def normalize_error_type(raw: Any, default: ErrorCategory = ErrorCategory.SYNTAX) -> ErrorCategory:
    """Classify a free-text type/category by case-insensitive containment.

    Priority is syntax > structure > semantic > validation > warning, so a
    string like "validation warning" resolves to ``validation``.
    """
    text = str(raw).lower() if raw else ""
    for category in ErrorCategory:
        if category.value in text:
            return category
    return default


def infer_severity(record: Mapping[str, Any]) -> Severity:
    """Explicit severity wins; otherwise infer from the message text."""
    explicit = str(record.get("severity") or "").strip().lower()
    if explicit in _SEVERITIES:
        return Severity(explicit)

    message = str(record.get("message") or "").lower()
    for keywords, severity in _SEVERITY_KEYWORDS:
        if any(k in message for k in keywords):
            return severity
    return Severity.MEDIUM


def extract_position(message: str) -> dict[str, int]:
    """Pull ``position``/``line``/``column`` out of parser-style messages."""
    found: dict[str, int] = {}
    if match := _POSITION.search(message):
        found["position"] = _locator(match.group(1))
    if match := _LINE_COLUMN.search(message):
        found["line"] = _locator(match.group(1))
        found["column"] = _locator(match.group(2))
    else:
        if match := _LINE.search(message):
            found["line"] = _locator(match.group(1))
        if match := _COLUMN.search(message):
            found["column"] = _locator(match.group(1))
    return {k: v for k, v in found.items() if v is not None}


def _locator(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _confidence(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        confidence = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return confidence if math.isfinite(confidence) else None


def normalize_suggestions(raw: Any) -> tuple[Suggestion, ...]:
    """Accept a list of dict or plain-string suggestions, or a single one.

    Missing safety means safe; any other scalar is kept as its text.
    """
    if raw is None or (isinstance(raw, (str, Mapping, list, tuple)) and not raw):
        return ()
    if not isinstance(raw, (list, tuple)):
        raw = [raw]

    out = []
    for item in raw:
        if isinstance(item, Mapping):
            text = item.get("text") or item.get("suggestion") or str(dict(item))
            safety_raw = item.get("safety") or item.get("risk")
            confidence = _confidence(item.get("confidence"))
        else:
            text, safety_raw, confidence = str(item), None, None

        if not safety_raw:
            safety = SuggestionSafety.SAFE
        elif str(safety_raw).lower() in _SAFETIES:
            safety = SuggestionSafety(str(safety_raw).lower())
        else:
            safety = SuggestionSafety.RISKY  # unrecognized risk label
        out.append(Suggestion(text=str(text), safety=safety, confidence=confidence))
    return tuple(out)


def normalize_error(record: Any, index: int, default_type: ErrorCategory = ErrorCategory.SYNTAX) -> NormalizedError:
    """Normalize one record; ``index`` is its 0-based position in the input."""
    if not isinstance(record, Mapping):
        record = {"message": str(record)}

    message = str(record.get("message") or "Unknown error")
    located = extract_position(message)

    def locate(name: str) -> int | None:
        value = _locator(record.get(name))
        return value if value is not None else located.get(name)

    snippet = record.get("snippet")
    explanation = record.get("explanation")
    return NormalizedError(
        id=str(record.get("id") or f"err-{index + 1}"),
        type=normalize_error_type(record.get("type") or record.get("category"), default_type),
        severity=infer_severity(record),
        message=message,
        line=locate("line"),
        column=locate("column"),
        position=locate("position"),
        explanation=str(explanation) if explanation is not None else None,
        confidence=_confidence(record.get("confidence")),
        snippet=str(snippet) if snippet is not None else None,
        suggestions=normalize_suggestions(record.get("suggestions")),
    )


def normalize_errors(
    raw: Iterable[Any] | None, default_type: ErrorCategory = ErrorCategory.SYNTAX
) -> list[NormalizedError]:
    """Normalize a raw error list, preserving input order.

    The list is not split into errors and warnings here; callers partition
    on ``type == warning``.
    """
    return [normalize_error(record, i, default_type) for i, record in enumerate(raw or ())]
