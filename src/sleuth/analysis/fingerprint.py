"""Schema Fingerprint Engine — shallow structural signatures per file format.

Each format has its own pure function returning a ``SchemaFingerprint``.
None of them raise: an internal fault becomes a single entry in ``issues``
and whatever was gathered up to that point is still returned.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sleuth.models.fingerprint import SchemaFingerprint

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 10

_XML_TAG = re.compile(r"<([a-zA-Z][a-zA-Z0-9:_-]*)")
_YAML_KEY = re.compile(r"^(?P<key>[^\s#:\-\[\]{}][^:#]*?)\s*:(?:\s+(?P<value>.*))?$")
_YAML_ITEM = re.compile(r"^-(?:\s+(?P<rest>.*))?$")
_NUMBER = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
    r"|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
)


@dataclass
class _Draft:
    """Mutable accumulator frozen into a SchemaFingerprint at the end."""

    file_type: str
    top_level_keys: list[str] = field(default_factory=list)
    column_headers: list[str] = field(default_factory=list)
    tag_names: list[str] = field(default_factory=list)
    record_count: int | None = None
    data_types: dict[str, list[str]] = field(default_factory=dict)
    issues: list[str] = field(default_factory=list)

    def add_type(self, name: str, type_name: str) -> None:
        seen = self.data_types.setdefault(name, [])
        if type_name not in seen:
            seen.append(type_name)

    def fail(self, exc: Exception) -> None:
        logger.warning("Fingerprinting %s content failed: %s", self.file_type, type(exc).__name__)
        self.issues.append(f"Failed to analyze {self.file_type} schema")

    def freeze(self) -> SchemaFingerprint:
        return SchemaFingerprint(
            file_type=self.file_type,
            top_level_keys=tuple(_unique(str(k) for k in self.top_level_keys)),
            column_headers=tuple(str(h) for h in self.column_headers),
            tag_names=tuple(self.tag_names),
            record_count=self.record_count,
            data_types={str(k): tuple(v) for k, v in self.data_types.items()},
            issues=tuple(self.issues),
        )

    def result(self) -> SchemaFingerprint:
        """Freeze, falling back to an issue-only fingerprint if that fails."""
        try:
            return self.freeze()
        except Exception as exc:
            logger.warning("Freezing %s fingerprint failed: %s", self.file_type, type(exc).__name__)
            return SchemaFingerprint(
                file_type=self.file_type,
                issues=(f"Failed to analyze {self.file_type} schema",),
            )


def value_type(value: Any) -> str:
    """Primitive-or-container type name of a parsed value."""
    if value is None:
        return "empty"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return "string"


def cell_type(cell: str) -> str:
    """Type of a raw text cell: empty, number, boolean or string."""
    value = cell.strip()
    if value == "":
        return "empty"
    if _NUMBER.fullmatch(value):
        return "number"
    if value.lower() in ("true", "false"):
        return "boolean"
    return "string"


def _unique(items: Any) -> list[str]:
    out: list[str] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out


def _fill_from_parsed(draft: _Draft, parsed: Any, sample_size: int) -> None:
    if isinstance(parsed, Sequence) and not isinstance(parsed, (str, bytes)):
        sample = list(parsed[:sample_size])
        draft.record_count = len(parsed)
        records = [r for r in sample if isinstance(r, Mapping)]
        if len(records) != len(sample):
            draft.issues.append("Array contains non-object elements")

        draft.top_level_keys = _unique(k for r in records for k in r)
        for key in draft.top_level_keys:
            draft.data_types[key] = []
            for record in records:
                if key in record:
                    draft.add_type(key, value_type(record[key]))

        missing = next(
            (k for r in records for k in draft.top_level_keys if k not in r), None
        )
        if missing is not None:
            draft.issues.append(f"Missing key '{missing}' in some records")
    elif isinstance(parsed, Mapping):
        draft.top_level_keys = _unique(parsed)
        draft.record_count = 1
        for key, value in parsed.items():
            draft.add_type(key, value_type(value))


def json_fingerprint(parsed: Any, sample_size: int = DEFAULT_SAMPLE_SIZE) -> SchemaFingerprint:
    """Fingerprint already-parsed JSON.

    Arrays: ``record_count`` is the full length; keys and types come from the
    first ``sample_size`` elements only. A single object yields its own keys
    and ``record_count == 1``. Any other shape gives an empty fingerprint.
    """
    draft = _Draft("json")
    try:
        _fill_from_parsed(draft, parsed, sample_size)
    except Exception as exc:
        draft.fail(exc)
    return draft.result()


def csv_fingerprint(content: str | Sequence[str], sample_size: int = DEFAULT_SAMPLE_SIZE) -> SchemaFingerprint:
    """Fingerprint CSV text with a naive comma split.

    Quoted fields containing commas will misalign columns; this is an
    accepted approximation, not a full CSV parse.
    """
    draft = _Draft("csv")
    try:
        lines = content.splitlines() if isinstance(content, str) else list(content)
        if not lines:
            return draft.result()

        headers = [h.strip() for h in lines[0].split(",")]
        draft.column_headers = headers
        draft.record_count = len(lines) - 1
        for header in headers:
            draft.data_types.setdefault(header, [])

        sample = lines[1:sample_size + 1]
        for line in sample:
            values = line.split(",")
            for i, header in enumerate(headers):
                draft.add_type(header, cell_type(values[i] if i < len(values) else ""))

        for line in sample:
            count = len(line.split(","))
            if count != len(headers):
                draft.issues.append(
                    f"Inconsistent column count: expected {len(headers)}, found {count}"
                )
                break
    except Exception as exc:
        draft.fail(exc)
    return draft.result()


def xml_fingerprint(content: str) -> SchemaFingerprint:
    """Collect distinct element names anywhere in the document.

    No DOM is built and well-formedness is not checked.
    """
    draft = _Draft("xml")
    try:
        draft.tag_names = _unique(m.group(1) for m in _XML_TAG.finditer(content))
    except Exception as exc:
        draft.fail(exc)
    return draft.result()


def _yaml_scalar_type(raw: str | None) -> str:
    if raw is None:
        return "object"  # value continues on an indented block
    value = raw.split(" #", 1)[0].strip()
    if value in ("", "~", "null", "Null", "NULL"):
        return "empty"
    if value.startswith("["):
        return "array"
    if value.startswith("{"):
        return "object"
    if value.startswith(("'", '"')):
        return "string"
    return cell_type(value)


def _scan_yaml(draft: _Draft, content: str, sample_size: int) -> None:
    lines = [
        ln for ln in content.splitlines()
        if ln.strip() and not ln.lstrip().startswith("#") and ln.strip() not in ("---", "...")
    ]
    top = [ln for ln in lines if not ln[0].isspace()]
    if top and _YAML_ITEM.match(top[0]):
        _scan_yaml_sequence(draft, lines, sample_size)
        return

    keys = []
    for line in top:
        match = _YAML_KEY.match(line)
        if match:
            keys.append(match.group("key").strip())
            draft.add_type(keys[-1], _yaml_scalar_type(match.group("value")))
    draft.top_level_keys = _unique(keys)
    draft.record_count = 1 if keys else None


def _scan_yaml_sequence(draft: _Draft, lines: list[str], sample_size: int) -> None:
    records: list[dict[str, str | None]] = []
    item_indent = None
    for line in lines:
        if not line[0].isspace():
            item = _YAML_ITEM.match(line)
            if not item:
                continue
            records.append({})
            rest = item.group("rest") or ""
            item_indent = len(line) - len(rest) if rest else None
            match = _YAML_KEY.match(rest)
            if match:
                records[-1][match.group("key").strip()] = match.group("value")
            continue
        if not records or len(records) > sample_size:
            continue
        indent = len(line) - len(line.lstrip())
        if item_indent is None:
            item_indent = indent
        if indent == item_indent:
            match = _YAML_KEY.match(line.strip())
            if match:
                records[-1][match.group("key").strip()] = match.group("value")

    draft.record_count = len(records)
    sample = records[:sample_size]
    draft.top_level_keys = _unique(k for r in sample for k in r)
    for key in draft.top_level_keys:
        draft.data_types[key] = []
        for record in sample:
            if key in record:
                draft.add_type(key, _yaml_scalar_type(record[key]))
    missing = next((k for r in sample for k in draft.top_level_keys if k not in r), None)
    if missing is not None:
        draft.issues.append(f"Missing key '{missing}' in some records")


def yaml_fingerprint(content: Any, sample_size: int = DEFAULT_SAMPLE_SIZE) -> SchemaFingerprint:
    """Fingerprint YAML by a shallow line scan of top-level keys.

    Already-parsed structures follow the JSON rules. For a top-level sequence
    the keys of the first ``sample_size`` items are collected.
    """
    draft = _Draft("yaml")
    try:
        if isinstance(content, str):
            _scan_yaml(draft, content, sample_size)
        else:
            _fill_from_parsed(draft, content, sample_size)
    except Exception as exc:
        draft.fail(exc)
    return draft.result()


def build_fingerprint(content: Any, file_type: str, sample_size: int = DEFAULT_SAMPLE_SIZE) -> SchemaFingerprint:
    """Dispatch to the per-format fingerprint function.

    Raw JSON text is parsed here; a parse failure is reported as an issue.
    """
    if file_type == "json":
        if not isinstance(content, str):
            return json_fingerprint(content, sample_size)
        try:
            parsed = json.loads(content)
        except (ValueError, RecursionError):
            return SchemaFingerprint(file_type="json", issues=("Unable to parse JSON content",))
        return json_fingerprint(parsed, sample_size)
    if file_type == "csv":
        return csv_fingerprint(content, sample_size)
    if file_type == "xml":
        return xml_fingerprint(content if isinstance(content, str) else str(content))
    if file_type == "yaml":
        return yaml_fingerprint(content, sample_size)
    return SchemaFingerprint(file_type="json", issues=(f"Unsupported file type: {file_type}",))
