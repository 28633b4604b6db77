"""FileRecord — a minimal file-like record for build pipelines.

Holds a path, an optional base directory, and an opaque payload. The
relative path (path with the base stripped) is what glob patterns are
matched against.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath


@dataclass(frozen=True, slots=True)
class FileRecord:
    """A file flowing through a pipeline.

    ``relative`` is computed once from ``path`` and ``base``. Without a base,
    or when the path lies outside the base, it is the path unchanged.

    Equality and hashing use the identity fields only; the payload is never
    compared.
    """

    path: str
    base: str | None = None
    contents: bytes | None = field(default=None, compare=False, repr=False)

    # Computed field — derived from path and base
    _relative: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_relative", _relative_to(self.path, self.base))

    @property
    def relative(self) -> str:
        """Path relative to the base."""
        return self._relative

    @property
    def basename(self) -> str:
        """Final path segment."""
        return PurePosixPath(self.path).name


def _relative_to(path: str, base: str | None) -> str:
    if not base:
        return path
    p = PurePosixPath(path)
    if not p.is_relative_to(base):
        return path
    return p.relative_to(base).as_posix()
