"""DataInput implementations for file-like records.

Each input extracts a path-like identity from a record and returns it as
MatchingData for predicate evaluation. Records are duck-typed: anything
with the right attribute works, and a plain string is its own identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from refilter._types import MatchingData, Record


@dataclass(frozen=True, slots=True)
class PathInput:
    """Extracts the record's full path."""

    def get(self, ctx: Record | str, /) -> MatchingData:
        if isinstance(ctx, str):
            return ctx
        return _str_attr(ctx, "path")


@dataclass(frozen=True, slots=True)
class RelativePathInput:
    """Extracts the record's path relative to its base.

    Falls back to ``path`` for records that carry no ``relative`` attribute.
    """

    def get(self, ctx: Record | str, /) -> MatchingData:
        if isinstance(ctx, str):
            return ctx
        relative = _str_attr(ctx, "relative")
        if relative is not None:
            return relative
        return _str_attr(ctx, "path")


def _str_attr(ctx: object, name: str) -> str | None:
    value = getattr(ctx, name, None)
    return value if isinstance(value, str) else None
