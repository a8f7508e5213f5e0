"""Inbound request models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

FileTypeOrAuto = Literal["auto", "json", "csv", "xml", "yaml"]


class AnalyzeRequest(BaseModel):
    """Validated body of POST /analyze."""

    content: str
    file_type: FileTypeOrAuto = "auto"
    file_name: Optional[str] = None
    max_errors: int = 100
