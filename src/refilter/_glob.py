"""Glob matchers implementing the InputMatcher protocol.

Patterns are matched segment by segment against a ``/``-separated path,
the way build tools have always matched globs against file paths:

- ``*`` matches any run of characters inside one segment
- ``?`` matches exactly one character inside one segment
- ``[...]`` is a character class (``!`` or ``^`` negates, ``a-z`` ranges)
- ``**`` as a whole segment matches zero or more segments
- ``{a,b}`` expands to alternatives before matching (nesting allowed)
- ``{1..3}``, ``{01..10..3}`` and ``{a..e}`` expand to ranges
- ``\\`` escapes the next character

Each magic segment is compiled with ``google-re2``, so matching one segment
is linear in its length. RE2 has no lookahead, so the dotfile rule is
enforced per segment in Python rather than inside the regex. The walk across
segments remembers which (segment, part) positions already failed, so
patterns with several ``**`` stay polynomial in the path depth.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import re2

from refilter._config import MatchOptions
from refilter._matcher import GlobPatternError

if TYPE_CHECKING:
    from refilter._types import MatchingData

_MAGIC = frozenset("*?[\\")


class _GlobStar:
    """Sentinel segment for ``**``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "GLOBSTAR"


GLOBSTAR = _GlobStar()


@dataclass(frozen=True, slots=True)
class _Segment:
    """One compiled path segment of a glob pattern.

    Literal segments compare by string equality; magic segments carry a
    compiled RE2 pattern. ``literal_dot`` records whether the segment starts
    with a literal ``.``, which is what lets it match a dotfile.
    """

    source: str
    literal: str | None
    regex: re2.Pattern[str] | None
    literal_dot: bool

    def matches(self, part: str, *, dot: bool, nocase: bool) -> bool:
        if self.literal is not None:
            if nocase:
                return part.casefold() == self.literal.casefold()
            return part == self.literal
        if part.startswith(".") and not self.literal_dot:
            # "." and ".." are never matched by wildcards, even with dot=True.
            if not dot or part in (".", ".."):
                return False
        return self.regex is not None and self.regex.search(part) is not None


type _Part = _Segment | _GlobStar


@dataclass(frozen=True, slots=True)
class GlobMatcher:
    """Match a path against a single (non-negated) glob pattern.

    The pattern is brace-expanded and compiled at construction time.

    Raises:
        GlobPatternError: If a segment is not valid once translated to RE2.
    """

    pattern: str
    nocase: bool = False
    dot: bool = False
    match_base: bool = False
    _alternatives: tuple[tuple[_Part, ...], ...] = field(init=False, repr=False)
    _basename_only: bool = field(init=False, repr=False)

    def __post_init__(self) -> None:
        alternatives = tuple(
            _compile_parts(p, nocase=self.nocase) for p in expand_braces(self.pattern)
        )
        object.__setattr__(self, "_alternatives", alternatives)
        object.__setattr__(self, "_basename_only", self.match_base and "/" not in self.pattern)

    def matches(self, value: MatchingData, /) -> bool:
        if not isinstance(value, str):
            return False
        parts = value.split("/")
        if self._basename_only:
            parts = parts[-1:]
        return any(self._match_parts(alt, parts) for alt in self._alternatives)

    def _match_parts(self, segments: tuple[_Part, ...], parts: list[str]) -> bool:
        return _walk(segments, parts, dot=self.dot, nocase=self.nocase)


@dataclass(frozen=True, slots=True)
class GlobListMatcher:
    """Match a path against an ordered list of glob patterns.

    Last matching pattern wins: a plain entry includes the path, a negated
    entry (odd number of leading ``!``) excludes it. When the first entry is
    negated the list starts out including everything, so ``["!*.json"]``
    means "everything except JSON files".
    """

    patterns: tuple[str, ...]
    options: MatchOptions = field(default_factory=MatchOptions)
    _entries: tuple[tuple[bool, GlobMatcher], ...] = field(init=False, repr=False)
    _initial: bool = field(init=False, repr=False)

    def __post_init__(self) -> None:
        entries = []
        for raw in self.patterns:
            negated, pattern = split_negation(raw)
            matcher = GlobMatcher(
                pattern,
                nocase=self.options.nocase,
                dot=self.options.dot,
                match_base=self.options.match_base,
            )
            entries.append((negated, matcher))
        object.__setattr__(self, "_entries", tuple(entries))
        object.__setattr__(self, "_initial", bool(entries) and entries[0][0])

    def matches(self, value: MatchingData, /) -> bool:
        if not isinstance(value, str):
            return False
        included = self._initial
        for negated, matcher in self._entries:
            if matcher.matches(value):
                included = not negated
        return included


def split_negation(pattern: str) -> tuple[bool, str]:
    """Strip leading ``!`` markers. Returns (negated, remaining pattern)."""
    count = len(pattern) - len(pattern.lstrip("!"))
    return count % 2 == 1, pattern[count:]


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternation and ``{x..y[..step]}`` ranges, outermost
    group first.

    Groups with neither a top-level comma nor a valid range are kept
    literally, as are escaped braces. ``"a/{b,c{d,e}}.js"`` expands to
    ``a/b.js``, ``a/cd.js``, ``a/ce.js``; ``"f{08..10}"`` to ``f08``,
    ``f09``, ``f10``.
    """
    depth = 0
    start = -1
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "{":
            if depth == 0:
                start = i
            depth += 1
        elif c == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                body = pattern[start + 1 : i]
                choices = _split_top_level(body)
                if len(choices) == 1:
                    choices = _expand_range(body)
                if choices:
                    prefix, suffix = pattern[:start], pattern[i + 1 :]
                    out: list[str] = []
                    for choice in choices:
                        out.extend(expand_braces(prefix + choice + suffix))
                    return out
        i += 1
    return [pattern]


_NUMERIC_RANGE = re2.compile(r"(-?\d+)\.\.(-?\d+)(?:\.\.(-?\d+))?")
_ALPHA_RANGE = re2.compile(r"([A-Za-z])\.\.([A-Za-z])(?:\.\.(-?\d+))?")


def _expand_range(body: str) -> list[str]:
    """Values of a ``x..y[..step]`` range body, or [] if it is not a range.

    Numeric bounds written with a leading zero pad every value to the width
    of the wider bound.
    """
    m = _NUMERIC_RANGE.fullmatch(body)
    if m is not None:
        lo, hi = m.group(1), m.group(2)
        padded = any(len(b.lstrip("-")) > 1 and b.lstrip("-").startswith("0") for b in (lo, hi))
        width = max(len(lo), len(hi)) if padded else 0
        return [str(n).zfill(width) for n in _stepped(int(lo), int(hi), m.group(3))]
    m = _ALPHA_RANGE.fullmatch(body)
    if m is not None:
        return [chr(n) for n in _stepped(ord(m.group(1)), ord(m.group(2)), m.group(3))]
    return []


def _stepped(first: int, last: int, step: str | None) -> range:
    size = abs(int(step or 1)) or 1
    if first <= last:
        return range(first, last + 1, size)
    return range(first, last - 1, -size)


def _split_top_level(body: str) -> list[str]:
    choices: list[str] = []
    depth = 0
    current: list[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            current.append(body[i : i + 2])
            i += 2
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        elif c == "," and depth == 0:
            choices.append("".join(current))
            current = []
            i += 1
            continue
        current.append(c)
        i += 1
    choices.append("".join(current))
    return choices


# ═══════════════════════════════════════════════════════════════════════════════
# Segment compilation
# ═══════════════════════════════════════════════════════════════════════════════


def _compile_parts(pattern: str, *, nocase: bool) -> tuple[_Part, ...]:
    parts: list[_Part] = []
    for seg in pattern.split("/"):
        if seg == "**":
            # Consecutive globstars are equivalent to one.
            if parts and parts[-1] is GLOBSTAR:
                continue
            parts.append(GLOBSTAR)
        else:
            parts.append(_compile_segment(pattern, seg, nocase=nocase))
    return tuple(parts)


def _compile_segment(pattern: str, seg: str, *, nocase: bool) -> _Segment:
    if not _MAGIC.intersection(seg):
        return _Segment(source=seg, literal=seg, regex=None, literal_dot=seg.startswith("."))

    body = _translate(seg)
    flags = "(?i)" if nocase else ""
    try:
        regex = re2.compile(f"{flags}^(?:{body})$")
    except re2.error as e:
        raise GlobPatternError(pattern, str(e)) from e
    literal_dot = seg.startswith(".") or seg.startswith("\\.")
    return _Segment(source=seg, literal=None, regex=regex, literal_dot=literal_dot)


def _translate(seg: str) -> str:
    """Translate one glob segment into an RE2 regex body."""
    out: list[str] = []
    i = 0
    n = len(seg)
    while i < n:
        c = seg[i]
        i += 1
        if c == "\\":
            if i < n:
                out.append(re2.escape(seg[i]))
                i += 1
            else:
                out.append(re2.escape("\\"))
        elif c == "*":
            while i < n and seg[i] == "*":
                i += 1
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = _class_end(seg, i)
            if end < 0:
                out.append(re2.escape("["))
            else:
                out.append(_translate_class(seg[i:end]))
                i = end + 1
        else:
            out.append(re2.escape(c))
    return "".join(out)


def _class_end(seg: str, start: int) -> int:
    """Index of the ``]`` closing a class opened just before ``start``, or -1."""
    j = start
    if j < len(seg) and seg[j] in "!^":
        j += 1
    if j < len(seg) and seg[j] == "]":
        j += 1
    while j < len(seg):
        if seg[j] == "\\":
            j += 2
            continue
        if seg[j] == "]":
            return j
        j += 1
    return -1


def _translate_class(body: str) -> str:
    negated = body[:1] in ("!", "^")
    if negated:
        body = body[1:]
    out: list[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            out.append(re2.escape(body[i + 1]))
            i += 2
            continue
        out.append(c if c == "-" else re2.escape(c))
        i += 1
    if negated:
        return "[^/" + "".join(out) + "]"
    return "[" + "".join(out) + "]"


# ═══════════════════════════════════════════════════════════════════════════════
# Segment walking
# ═══════════════════════════════════════════════════════════════════════════════


def _walk(segments: tuple[_Part, ...], parts: list[str], *, dot: bool, nocase: bool) -> bool:
    return _walk_from(segments, 0, parts, 0, set(), dot=dot, nocase=nocase)


def _walk_from(
    segments: tuple[_Part, ...],
    si: int,
    parts: list[str],
    pi: int,
    failed: set[tuple[int, int]],
    *,
    dot: bool,
    nocase: bool,
) -> bool:
    """Match ``segments[si:]`` against ``parts[pi:]``.

    ``failed`` holds the (si, pi) positions already known not to match, so
    each globstar retries a given suffix at most once.
    """
    if (si, pi) in failed:
        return False
    start = (si, pi)
    while si < len(segments):
        seg = segments[si]
        if isinstance(seg, _GlobStar):
            if si == len(segments) - 1:
                return all(_globstar_can_take(p, dot=dot) for p in parts[pi:])
            for k in range(pi, len(parts) + 1):
                if _walk_from(segments, si + 1, parts, k, failed, dot=dot, nocase=nocase):
                    return True
                if k < len(parts) and not _globstar_can_take(parts[k], dot=dot):
                    break
            failed.add(start)
            return False
        if pi >= len(parts) or not seg.matches(parts[pi], dot=dot, nocase=nocase):
            failed.add(start)
            return False
        si += 1
        pi += 1
    return pi == len(parts)


def _globstar_can_take(part: str, *, dot: bool) -> bool:
    if part in (".", ".."):
        return False
    return dot or not part.startswith(".")
