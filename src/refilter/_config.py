"""Config types for filter construction.

Options bags arrive as plain dicts (JSON/YAML shaped, or keyword mappings
passed straight to ``create_filter``). They are parsed once into frozen
dataclasses so stages never see raw dicts:

  dict → parse_match_options()   → MatchOptions   → GlobListMatcher
  dict → parse_restore_options() → RestoreOptions → RestoreStage
  dict → parse_filter_config()   → FilterConfig   → load_filter()
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConfigParseError(Exception):
    """Error parsing a config dict into config types."""


class RestoreOrder(Enum):
    """Where a restore stage places drained records relative to its input.

    DIVERTED_FIRST holds direct input until end of input, then emits the
    drained records followed by the held ones. DIRECT_FIRST emits direct
    input immediately and appends the drained records at end of input.
    """

    DIVERTED_FIRST = "diverted_first"
    DIRECT_FIRST = "direct_first"


# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class MatchOptions:
    """Options forwarded to the glob collaborator in pattern mode.

    - nocase: case-insensitive matching
    - match_base: patterns without a slash match the basename only
    - dot: wildcards may match segments that start with a dot
    """

    nocase: bool = False
    match_base: bool = False
    dot: bool = False


@dataclass(frozen=True, slots=True)
class RestoreOptions:
    """Options for ``FilterStage.restore()``.

    end=True closes the restore stage as soon as its bound filter ends,
    without waiting for the restore stage's own input to end.
    """

    end: bool = False
    order: RestoreOrder = RestoreOrder.DIVERTED_FIRST


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Declarative description of a pattern-mode filter stage."""

    patterns: tuple[str, ...]
    options: MatchOptions = field(default_factory=MatchOptions)
    name: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

# Accepted spellings for each MatchOptions field. camelCase follows the
# option names build tools have always used for glob matching.
_MATCH_OPTION_KEYS = {
    "nocase": "nocase",
    "match_base": "match_base",
    "matchBase": "match_base",
    "dot": "dot",
}

_RESTORE_OPTION_KEYS = frozenset({"end", "order"})


def parse_match_options(data: MatchOptions | Mapping[str, Any] | None) -> MatchOptions:
    """Parse a mapping into MatchOptions.

    None yields the defaults; a MatchOptions instance is returned unchanged.

    Raises:
        ConfigParseError: If the mapping has unknown keys or non-bool values.
    """
    if data is None:
        return MatchOptions()
    if isinstance(data, MatchOptions):
        return data
    if not isinstance(data, Mapping):
        msg = f"match options must be a mapping, got {type(data).__name__}"
        raise ConfigParseError(msg)

    values: dict[str, bool] = {}
    for key, value in data.items():
        target = _MATCH_OPTION_KEYS.get(key)
        if target is None:
            expected = sorted(_MATCH_OPTION_KEYS)
            msg = f"unknown match option {key!r} (expected one of {expected})"
            raise ConfigParseError(msg)
        values[target] = _require_bool(key, value)
    return MatchOptions(**values)


def parse_restore_options(
    data: RestoreOptions | Mapping[str, Any] | None,
) -> RestoreOptions:
    """Parse a mapping into RestoreOptions.

    ``order`` accepts a RestoreOrder or its string value.

    Raises:
        ConfigParseError: If the mapping is malformed.
    """
    if data is None:
        return RestoreOptions()
    if isinstance(data, RestoreOptions):
        return data
    if not isinstance(data, Mapping):
        msg = f"restore options must be a mapping, got {type(data).__name__}"
        raise ConfigParseError(msg)

    unknown = set(data) - _RESTORE_OPTION_KEYS
    if unknown:
        msg = f"unknown restore options: {sorted(unknown)}"
        raise ConfigParseError(msg)

    end = _require_bool("end", data.get("end", False))
    order = _parse_order(data.get("order", RestoreOrder.DIVERTED_FIRST))
    return RestoreOptions(end=end, order=order)


def parse_filter_config(data: Mapping[str, Any]) -> FilterConfig:
    """Parse a dict into a FilterConfig.

    Exactly one of ``pattern`` (a string) or ``patterns`` (a non-empty list
    of strings) is required; ``options`` and ``name`` are optional.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, Mapping):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    has_pattern = "pattern" in data
    has_patterns = "patterns" in data
    if has_pattern and has_patterns:
        msg = "exactly one of 'pattern' or 'patterns' must be set, got both"
        raise ConfigParseError(msg)
    if not has_pattern and not has_patterns:
        msg = "one of 'pattern' or 'patterns' is required"
        raise ConfigParseError(msg)

    if has_pattern:
        pattern = data["pattern"]
        if not isinstance(pattern, str):
            msg = f"'pattern' must be a string, got {type(pattern).__name__}"
            raise ConfigParseError(msg)
        patterns: tuple[str, ...] = (pattern,)
    else:
        raw = data["patterns"]
        if not isinstance(raw, list) or not raw:
            msg = "'patterns' must be a non-empty list"
            raise ConfigParseError(msg)
        for p in raw:
            if not isinstance(p, str):
                msg = f"'patterns' entries must be strings, got {type(p).__name__}"
                raise ConfigParseError(msg)
        patterns = tuple(raw)

    name = data.get("name")
    if name is not None and not isinstance(name, str):
        msg = f"'name' must be a string, got {type(name).__name__}"
        raise ConfigParseError(msg)

    return FilterConfig(
        patterns=patterns,
        options=parse_match_options(data.get("options")),
        name=name,
    )


def _require_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        msg = f"option {key!r} must be a bool, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _parse_order(value: Any) -> RestoreOrder:
    if isinstance(value, RestoreOrder):
        return value
    try:
        return RestoreOrder(value)
    except ValueError:
        expected = [o.value for o in RestoreOrder]
        msg = f"unknown restore order {value!r} (expected one of {expected})"
        raise ConfigParseError(msg) from None
