"""Fast local parser prechecks and file type detection.

Hints produced here are passed to the reasoning provider as grounding and
echoed back in responses; they never block a request.
"""

from __future__ import annotations

import csv
import io
import json
import re
import xml.etree.ElementTree as ET
from typing import Any

import yaml

from sleuth.analysis.normalizer import extract_position

MAX_HINTS = 3

_YAML_KEY_VALUE = re.compile(r"^[\w-]+\s*:\s*.+")
_YAML_LIST_ITEM = re.compile(r"^\s*-\s+.+")
_YAML_DOC_START = re.compile(r"^---\s*$")


def detect_file_type(content: str) -> str:
    """Deterministic sniffing: json, xml, yaml or csv, defaulting to json."""
    trimmed = content.lstrip()
    if not trimmed:
        return "json"
    if trimmed[0] in "{[":
        return "json"
    if trimmed[0] == "<":
        return "xml"

    first_lines = [ln.strip() for ln in trimmed.split("\n")[:2]]
    if _YAML_DOC_START.match(first_lines[0]):
        return "yaml"
    if any(_YAML_KEY_VALUE.match(ln) or _YAML_LIST_ITEM.match(ln) for ln in first_lines):
        return "yaml"

    lines = [ln for ln in trimmed.split("\n")[:5] if ln.strip()]
    if len(lines) >= 2:
        width = len(lines[0].split(","))
        if width >= 3:
            consistent = sum(1 for ln in lines[1:] if abs(len(ln.split(",")) - width) <= 1)
            if consistent >= (len(lines) - 1) // 2:
                return "csv"
    return "json"


def _hint(kind: str, message: str, parser: str, **locators: Any) -> dict[str, Any]:
    hint: dict[str, Any] = {"type": kind, "message": message}
    hint.update({k: v for k, v in locators.items() if v is not None})
    hint["extra"] = {"parser": parser}
    return hint


def precheck_json(content: str) -> list[dict[str, Any]]:
    try:
        json.loads(content)
    except json.JSONDecodeError as exc:
        return [_hint(
            "syntax_error", f"JSON parse error: {exc.msg}", "json",
            line=exc.lineno, column=exc.colno, position=exc.pos,
        )]
    except RecursionError:
        return [_hint("syntax_error", "JSON parse error: nesting too deep", "json")]
    return []


def precheck_csv(content: str) -> list[dict[str, Any]]:
    hints: list[dict[str, Any]] = []
    try:
        rows = list(csv.reader(io.StringIO(content)))
    except csv.Error as exc:
        located = extract_position(str(exc))
        return [_hint("syntax_error", f"CSV parse error: {exc}", "csv", line=located.get("line"))]

    if not rows:
        return hints
    expected = len(rows[0])
    for i, row in enumerate(rows[1:], start=2):
        if row and len(row) != expected:
            hint = _hint(
                "structure_error", f"Row {i}: {len(row)} columns vs {expected} expected",
                "csv", line=i, row=i,
            )
            hint["extra"].update(expected_columns=expected, actual_columns=len(row))
            hints.append(hint)
            if len(hints) >= MAX_HINTS:
                break
    return hints


def precheck_xml(content: str) -> list[dict[str, Any]]:
    try:
        ET.fromstring(content)
    except ET.ParseError as exc:
        line, column = exc.position
        return [_hint("syntax_error", f"XML parse error: {exc}", "xml", line=line, column=column + 1)]
    return []


def precheck_yaml(content: str) -> list[dict[str, Any]]:
    try:
        # Checked for errors only; the fingerprint never uses the parsed value.
        list(yaml.safe_load_all(content))
    except yaml.MarkedYAMLError as exc:
        mark = exc.problem_mark
        return [_hint(
            "syntax_error", f"YAML parse error: {exc.problem or exc}", "yaml",
            line=mark.line + 1 if mark else None,
            column=mark.column + 1 if mark else None,
            position=mark.index if mark else None,
        )]
    except yaml.YAMLError as exc:
        return [_hint("syntax_error", f"YAML parse error: {exc}", "yaml")]
    except RecursionError:
        return [_hint("syntax_error", "YAML parse error: nesting too deep", "yaml")]
    return []


_PRECHECKS = {
    "json": precheck_json,
    "csv": precheck_csv,
    "xml": precheck_xml,
    "yaml": precheck_yaml,
}


def run_prechecks(content: str, file_type: str) -> list[dict[str, Any]]:
    """Run the parser for ``file_type`` and return at most three hints."""
    check = _PRECHECKS.get(file_type)
    return check(content)[:MAX_HINTS] if check else []
