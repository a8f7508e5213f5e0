"""Extract a JSON result from free-form reasoning provider output."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCED = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


class UnparseableOutputError(ValueError):
    """No JSON result could be recovered from the provider output."""


def _balanced_object(text: str) -> str | None:
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            in_string = not in_string
        elif in_string:
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _candidates(text: str):
    yield text
    if match := _FENCED.search(text):
        yield match.group(1).strip()
    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        yield text[first:last + 1]
    if balanced := _balanced_object(text):
        yield balanced
    first, last = text.find("["), text.rfind("]")
    if first != -1 and last > first:
        yield text[first:last + 1]


def parse_llm_output(content: str) -> list[Any]:
    """Return the raw error list from provider output.

    Accepts a bare JSON list or an object with an ``errors`` list, tried in
    order: the whole text, a fenced code block, outermost braces, the first
    balanced object, outermost brackets.
    """
    text = (content or "").strip()
    for candidate in _candidates(text):
        try:
            parsed = json.loads(candidate)
        except (ValueError, RecursionError):
            continue
        if isinstance(parsed, list):
            return parsed
        if isinstance(parsed, dict) and isinstance(parsed.get("errors"), list):
            return list(parsed["errors"])
    raise UnparseableOutputError("Could not extract valid JSON from LLM response")
