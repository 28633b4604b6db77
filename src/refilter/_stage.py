"""Stages — push-based pass/divert filtering and restoration.

A FilterStage evaluates its predicate once per record: matching records go
downstream immediately, the rest are appended to the stage's DiversionBuffer.
A RestoreStage created with ``FilterStage.restore()`` is bound to that
buffer and drains it when its own input ends, merging the diverted records
back into the flow.

Data flow is synchronous and single-threaded. ``write`` hands every produced
record to the downstream target before returning, so a target that cannot
accept a record raises, and the fault reaches the original caller unchanged.

Example::

    flt = create_filter("*.json")
    tail = flt.pipe(flt.restore())
    tail.pipe(sink)
    for record in records:
        flt.write(record)
    flt.end()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from refilter._buffer import DiversionBuffer
from refilter._config import (
    FilterConfig,
    MatchOptions,
    RestoreOptions,
    RestoreOrder,
    parse_restore_options,
)
from refilter._matcher import FilterError, resolve_matcher
from refilter._predicate import compile_predicate, describe_predicate

if TYPE_CHECKING:
    from refilter._predicate import Predicate
    from refilter._types import Sink

log = logging.getLogger(__name__)


class StageError(FilterError):
    """A stage was wired or driven incorrectly."""


class StageClosedError(StageError):
    """A record was written to a stage after its input ended."""

    def __init__(self, stage: str) -> None:
        self.stage = stage
        super().__init__(f"write after end: {stage} has already ended")


# ═══════════════════════════════════════════════════════════════════════════════
# Base stage
# ═══════════════════════════════════════════════════════════════════════════════


class Stage[R]:
    """Streaming stage with a single downstream target.

    Subclasses override the two hooks:
    - feed() yields 0..N output records per input record
    - flush() yields buffered tail records when input ends

    end() flushes, ends the target, then runs on_end callbacks. It is
    idempotent; write() after end() raises StageClosedError.
    """

    def __init__(self, name: str | None = None) -> None:
        self.name = name or type(self).__name__
        self._target: Sink[R] | None = None
        self._end_callbacks: list[Callable[[], None]] = []
        self._ended = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} ended={self._ended}>"

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def target(self) -> Sink[R] | None:
        return self._target

    def pipe[S: Sink[Any]](self, target: S) -> S:
        """Connect the downstream target and return it, so pipes chain.

        Raises:
            StageError: If this stage already has a target.
        """
        if self._target is not None:
            msg = f"{self.name} is already piped to {self._target!r}"
            raise StageError(msg)
        self._target = target
        return target

    def on_end(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once this stage has ended.

        Registering on a stage that has already ended runs it immediately.
        """
        if self._ended:
            callback()
            return
        self._end_callbacks.append(callback)

    def write(self, record: R) -> None:
        if self._ended:
            raise StageClosedError(self.name)
        for out in self.feed(record):
            self._emit(out)

    def end(self) -> None:
        if self._ended:
            return
        self._ended = True
        for out in self.flush():
            self._emit(out)
        if self._target is not None:
            self._target.end()
        callbacks, self._end_callbacks = self._end_callbacks, []
        for callback in callbacks:
            callback()

    def feed(self, record: R) -> Iterable[R]:
        return (record,)

    def flush(self) -> Iterable[R]:
        return ()

    def _emit(self, record: R) -> None:
        if self._target is None:
            log.debug("%s: no target, dropping %r", self.name, record)
            return
        self._target.write(record)


def chain(first: Stage[Any], *rest: Sink[Any]) -> Any:
    """Pipe stages left to right and return the last one.

    ``chain(f1, f2, f1.restore())`` is ``f1.pipe(f2).pipe(f1.restore())``.
    """
    tail: Any = first
    for stage in rest:
        tail = tail.pipe(stage)
    return tail


# ═══════════════════════════════════════════════════════════════════════════════
# Filter / restore pair
# ═══════════════════════════════════════════════════════════════════════════════


class FilterStage[R](Stage[R]):
    """Pass matching records downstream, divert the rest.

    The predicate is evaluated exactly once per record. Diverted records wait
    in this stage's DiversionBuffer until a bound RestoreStage drains them;
    ending a FilterStage never flushes the buffer by itself.
    """

    def __init__(self, predicate: Predicate[R], *, name: str | None = None) -> None:
        super().__init__(name or f"filter({describe_predicate(predicate)})")
        self.predicate = predicate
        self.passed = 0
        self.diverted = 0
        self._buffer: DiversionBuffer[R] = DiversionBuffer(owner=self.name)

    @property
    def buffer(self) -> DiversionBuffer[R]:
        return self._buffer

    def feed(self, record: R) -> Iterable[R]:
        if self.predicate.evaluate(record):
            self.passed += 1
            log.debug("%s: pass %r", self.name, record)
            return (record,)
        self._buffer.append(record)
        self.diverted += 1
        log.debug("%s: divert %r", self.name, record)
        return ()

    def restore(
        self,
        options: RestoreOptions | Mapping[str, Any] | None = None,
        *,
        end: bool | None = None,
        order: RestoreOrder | str | None = None,
    ) -> RestoreStage[R]:
        """Create a RestoreStage bound to this stage's diversion buffer.

        Keyword arguments override the matching fields of ``options``. Every
        restore stage spawned from one filter drains the same buffer; only
        the first drain yields records.

        With end=True the restore stage drains and closes as soon as this
        filter ends, even if nothing ever ends the restore stage's input.

        Raises:
            ConfigParseError: If the options are malformed.
        """
        opts = parse_restore_options(options)
        overrides = {k: v for k, v in (("end", end), ("order", order)) if v is not None}
        if overrides:
            opts = parse_restore_options({"end": opts.end, "order": opts.order, **overrides})

        stage: RestoreStage[R] = RestoreStage(
            self._buffer, order=opts.order, name=f"restore({self.name})"
        )
        if opts.end:
            self.on_end(stage.end)
        return stage


class RestoreStage[R](Stage[R]):
    """Merge a filter's diverted records back into the flow.

    Holds a non-owning reference to the bound filter's buffer and drains it
    once, when its own input ends (or when the bound filter ends, for stages
    created with end=True).

    Ordering depends on ``order``:
    - DIVERTED_FIRST: direct records are held; at end the drained records
      are emitted, then the held ones
    - DIRECT_FIRST: direct records pass through immediately; at end the
      drained records follow them
    """

    def __init__(
        self,
        buffer: DiversionBuffer[R],
        *,
        order: RestoreOrder = RestoreOrder.DIVERTED_FIRST,
        name: str | None = None,
    ) -> None:
        super().__init__(name)
        self.order = order
        self._buffer = buffer
        self._held: list[R] = []

    @property
    def drained(self) -> bool:
        """True once the bound buffer has been drained (by any restore stage)."""
        return self._buffer.drained

    def feed(self, record: R) -> Iterable[R]:
        if self.order is RestoreOrder.DIRECT_FIRST:
            return (record,)
        self._held.append(record)
        return ()

    def flush(self) -> Iterable[R]:
        restored = self._buffer.drain()
        held, self._held = self._held, []
        log.debug(
            "%s: restoring %d diverted record(s), %d held",
            self.name,
            len(restored),
            len(held),
        )
        if self.order is RestoreOrder.DIRECT_FIRST:
            return restored
        return (*restored, *held)


# ═══════════════════════════════════════════════════════════════════════════════
# Construction API
# ═══════════════════════════════════════════════════════════════════════════════


def create_filter(
    matcher: Any,
    options: MatchOptions | Mapping[str, Any] | None = None,
    *,
    name: str | None = None,
) -> FilterStage[Any]:
    """Create a FilterStage from a pattern, a list of patterns, or a function.

    ``options`` (nocase, match_base/matchBase, dot) is forwarded to the glob
    matcher in pattern mode and ignored in function mode.

    Raises:
        InvalidPredicateKind: If ``matcher`` is none of the accepted kinds.
        GlobPatternError: If a pattern cannot be compiled.
        ConfigParseError: If pattern-mode options are malformed.
    """
    spec = resolve_matcher(matcher, options)
    return FilterStage(compile_predicate(spec), name=name)


def load_filter(config: FilterConfig) -> FilterStage[Any]:
    """Create a pattern-mode FilterStage from a parsed FilterConfig."""
    return create_filter(list(config.patterns), config.options, name=config.name)
