"""Predicates — the record → bool test a FilterStage applies.

SinglePredicate combines a DataInput (extract identity) with an InputMatcher
(match identity). FunctionPredicate wraps a user-supplied callable.

The Predicate union type is pattern-matchable via match/case, and
compile_predicate() turns a resolved MatcherSpec into one of them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from refilter._glob import GlobListMatcher
from refilter._matcher import FunctionMatch, PatternMatch
from refilter.files._inputs import RelativePathInput

if TYPE_CHECKING:
    from refilter._matcher import MatcherSpec
    from refilter._types import DataInput, InputMatcher


@dataclass(frozen=True, slots=True)
class SinglePredicate[Ctx]:
    """A single predicate: extract the record identity, then match.

    Enforces the None -> false invariant: if the DataInput returns None,
    the predicate evaluates to False without consulting the matcher.
    """

    input: DataInput[Ctx]
    matcher: InputMatcher

    def evaluate(self, ctx: Any) -> bool:
        value = self.input.get(ctx)
        if value is None:
            return False
        return self.matcher.matches(value)


@dataclass(frozen=True, slots=True)
class FunctionPredicate[Ctx]:
    """A predicate backed by an arbitrary callable.

    The return value is coerced with bool(), so callables returning truthy
    objects behave like ones returning True.
    """

    function: Callable[[Ctx], Any]

    def evaluate(self, ctx: Any) -> bool:
        return bool(self.function(ctx))


type Predicate[Ctx] = SinglePredicate[Ctx] | FunctionPredicate[Ctx]


def compile_predicate(spec: MatcherSpec[Any]) -> Predicate[Any]:
    """Compile a resolved matcher into a ready-to-evaluate Predicate.

    Pattern mode reads the record's relative path and matches it against
    the pattern list with the resolved options. Function mode uses the
    function directly.

    Raises:
        GlobPatternError: If a pattern cannot be compiled.
    """
    match spec:
        case PatternMatch(patterns=patterns, options=options):
            return SinglePredicate(
                input=RelativePathInput(),
                matcher=GlobListMatcher(patterns=patterns, options=options),
            )
        case FunctionMatch(function=function):
            return FunctionPredicate(function=function)
    msg = f"unknown matcher spec: {type(spec).__name__}"  # pragma: no cover
    raise TypeError(msg)  # pragma: no cover


def describe_predicate(p: Predicate[Any]) -> str:
    """Short human-readable label, used to name stages in log output."""
    match p:
        case SinglePredicate(matcher=GlobListMatcher(patterns=patterns)):
            return ", ".join(patterns)
        case SinglePredicate(matcher=m):
            return type(m).__name__
        case FunctionPredicate(function=fn):
            return getattr(fn, "__qualname__", type(fn).__name__)
    return "predicate"  # pragma: no cover
