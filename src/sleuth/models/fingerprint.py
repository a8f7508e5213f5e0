"""Schema fingerprint — bounded-cost structural summary of an input file."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sleuth.core.types import FileType


class SchemaFingerprint(BaseModel):
    """Immutable structural signature attached to outbound reasoning requests.

    Set-valued fields (``top_level_keys``, ``tag_names`` and the values of
    ``data_types``) hold distinct entries in first-seen order; their order
    carries no meaning. ``column_headers`` is order-significant.
    Serializes with camelCase aliases (``fileType``, ``topLevelKeys`` ...).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    file_type: FileType
    top_level_keys: tuple[str, ...] = ()
    column_headers: tuple[str, ...] = ()
    tag_names: tuple[str, ...] = ()
    record_count: Optional[int] = None
    data_types: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    issues: tuple[str, ...] = ()

    def to_context(self) -> dict:
        """Compact alias-keyed dict for prompts, omitting empty fields."""
        return {
            k: v
            for k, v in self.model_dump(by_alias=True).items()
            if v not in (None, (), {}, [])
        }
