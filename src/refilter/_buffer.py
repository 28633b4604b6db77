"""DiversionBuffer — the side buffer shared by a filter/restore pair.

The owning FilterStage is the only writer (append on reject); bound
RestoreStages are the only readers (one-shot drain). The two phases never
overlap: a drain begins only after the writer's input has ended.
"""

from __future__ import annotations

import logging

from refilter._matcher import FilterError

log = logging.getLogger(__name__)


class BufferDrainedError(FilterError):
    """A record was diverted into a buffer that has already been drained."""

    def __init__(self, owner: str) -> None:
        self.owner = owner
        super().__init__(f"diversion buffer of {owner} was already drained")


class DiversionBuffer[R]:
    """Ordered store of diverted records, drained exactly once.

    Append order equals arrival order; records are never reordered or
    deduplicated. There is no random access; the contents only ever leave
    through drain().

    INV: after the first drain the buffer is empty and stays empty.
    """

    __slots__ = ("_drained", "_owner", "_records")

    def __init__(self, owner: str = "filter") -> None:
        self._records: list[R] = []
        self._drained = False
        self._owner = owner

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def __repr__(self) -> str:
        state = "drained" if self._drained else f"{len(self._records)} pending"
        return f"DiversionBuffer(owner={self._owner!r}, {state})"

    @property
    def drained(self) -> bool:
        """True once drain() has been called."""
        return self._drained

    def append(self, record: R) -> None:
        """Divert a record.

        Raises:
            BufferDrainedError: If the buffer has already been drained.
        """
        if self._drained:
            raise BufferDrainedError(self._owner)
        self._records.append(record)

    def drain(self) -> tuple[R, ...]:
        """Remove and return every diverted record, in divert order.

        A second drain returns an empty tuple rather than failing.
        """
        if self._drained:
            log.debug("%s: buffer already drained, nothing to restore", self._owner)
            return ()
        records, self._records = tuple(self._records), []
        self._drained = True
        log.debug("%s: drained %d diverted record(s)", self._owner, len(records))
        return records
