"""Core protocols and type aliases for refilter.

The type system splits a pattern-mode predicate into two ports:
- DataInput extracts the path-like identity from a record
- InputMatcher matches that identity, knowing nothing about records

Stages only ever talk to a Sink: anything that accepts ``write`` and ``end``.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

# The erased identity type. None means "no identity available" and makes the
# predicate evaluate to False.
MatchingData = str | None

Ctx = TypeVar("Ctx", contravariant=True)
R = TypeVar("R", contravariant=True)


@runtime_checkable
class Record(Protocol):
    """A file-like record with a stable path-like identity.

    The core never reads anything else from a record; payloads travel
    through untouched.
    """

    @property
    def path(self) -> str: ...


@runtime_checkable
class DataInput(Protocol[Ctx]):
    """Extract the identity of a record.

    Returning None signals "identity not available" and causes the
    predicate to evaluate to False.
    """

    def get(self, ctx: Ctx, /) -> MatchingData: ...


@runtime_checkable
class InputMatcher(Protocol):
    """Match against an extracted identity.

    Record-agnostic: the same GlobMatcher works for FileRecords, plain
    strings, or any other record shape a DataInput can read.
    """

    def matches(self, value: MatchingData, /) -> bool: ...


@runtime_checkable
class Sink(Protocol[R]):
    """Downstream end of a pipe: a stage or a terminal consumer."""

    def write(self, record: R, /) -> None: ...

    def end(self) -> None: ...
