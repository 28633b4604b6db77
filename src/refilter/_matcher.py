"""Matcher argument resolution.

``create_filter`` accepts a pattern string, a list of pattern strings, or a
function. The argument is classified exactly once, at construction time,
into a tagged variant:

- PatternMatch: one or more glob patterns plus the options that go with them
- FunctionMatch: an arbitrary record → bool callable (options are ignored)

Stages never inspect the raw argument again.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from refilter._config import MatchOptions, parse_match_options


class FilterError(Exception):
    """Base class for filter and stage errors."""


class InvalidPredicateKind(FilterError, TypeError):
    """The matcher argument is not a pattern, a list of patterns, or a function."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            "expected a pattern string, a non-empty list of pattern strings, "
            f"or a function, got {_describe(value)}"
        )


class GlobPatternError(FilterError):
    """A glob pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f'invalid glob pattern "{pattern}": {reason}')


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Pattern mode: glob patterns evaluated against a record's identity."""

    patterns: tuple[str, ...]
    options: MatchOptions = field(default_factory=MatchOptions)


@dataclass(frozen=True, slots=True)
class FunctionMatch[R]:
    """Function mode: the callable is the predicate."""

    function: Callable[[R], Any]


type MatcherSpec[R] = PatternMatch | FunctionMatch[R]


def resolve_matcher(
    value: Any,
    options: MatchOptions | Mapping[str, Any] | None = None,
) -> MatcherSpec[Any]:
    """Classify a matcher argument into PatternMatch or FunctionMatch.

    ``options`` is parsed and attached in pattern mode only; function mode
    ignores it without validating it.

    Raises:
        InvalidPredicateKind: If the argument is none of the accepted kinds.
        ConfigParseError: If pattern-mode options are malformed.
    """
    if isinstance(value, str):
        return PatternMatch(patterns=(value,), options=parse_match_options(options))
    if isinstance(value, list | tuple):
        if not value or not all(isinstance(p, str) for p in value):
            raise InvalidPredicateKind(value)
        return PatternMatch(patterns=tuple(value), options=parse_match_options(options))
    if callable(value):
        return FunctionMatch(function=value)
    raise InvalidPredicateKind(value)


def _describe(value: Any) -> str:
    if isinstance(value, list | tuple):
        if not value:
            return f"an empty {type(value).__name__}"
        kinds = sorted({type(v).__name__ for v in value})
        return f"a {type(value).__name__} of {', '.join(kinds)}"
    return type(value).__name__
