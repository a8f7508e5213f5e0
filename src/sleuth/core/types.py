"""Type aliases used across the Sleuth service."""

from __future__ import annotations

from typing import Literal

FileType = Literal["json", "csv", "xml", "yaml"]
VersionKind = Literal["model", "rag"]

FILE_TYPES: tuple[str, ...] = ("json", "csv", "xml", "yaml")
VERSION_KINDS: tuple[str, ...] = ("model", "rag")
