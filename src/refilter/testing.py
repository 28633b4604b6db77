"""Test utilities for refilter.

Provides a terminal sink that records what reaches it, and a helper that
drives a pipeline end to end. These exist to reduce boilerplate in tests
and examples; real pipelines pipe into their own consumers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from refilter._stage import Stage, StageClosedError
from refilter._types import Record


@dataclass(slots=True)
class CollectingSink:
    """Collect every record written to it, and whether it was ended.

    >>> from refilter import create_filter
    >>> from refilter.testing import CollectingSink
    >>> flt = create_filter("*.js")
    >>> sink = flt.pipe(CollectingSink())
    >>> flt.write("app.js"); flt.write("app.css"); flt.end()
    >>> sink.records, sink.ended
    (['app.js'], True)
    """

    records: list[Any] = field(default_factory=list)
    ended: bool = False
    end_count: int = 0

    def write(self, record: Any, /) -> None:
        if self.ended:
            raise StageClosedError("CollectingSink")
        self.records.append(record)

    def end(self) -> None:
        self.ended = True
        self.end_count += 1

    @property
    def paths(self) -> list[str]:
        """Identities of the collected records: a Record's ``path``, or the record itself."""
        return [r.path if isinstance(r, Record) else r for r in self.records]


def run_pipeline(
    head: Stage[Any], tail: Stage[Any], records: Iterable[Any]
) -> CollectingSink:
    """Pipe ``tail`` into a fresh CollectingSink, write ``records`` to
    ``head``, end ``head``, and return the sink."""
    sink = tail.pipe(CollectingSink())
    for record in records:
        head.write(record)
    head.end()
    return sink
