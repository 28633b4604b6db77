"""refilter — pass/divert filtering with later restoration for record streams.

All public types are exported from this module for flat imports:

    from refilter import create_filter, FilterStage, RestoreStage, MatchOptions
"""

import logging

__version__ = "0.1.0"

# Buffer
from refilter._buffer import BufferDrainedError, DiversionBuffer

# Config types — see refilter._config for details
from refilter._config import (
    ConfigParseError,
    FilterConfig,
    MatchOptions,
    RestoreOptions,
    RestoreOrder,
    parse_filter_config,
    parse_match_options,
    parse_restore_options,
)

# Glob collaborator
from refilter._glob import GlobListMatcher, GlobMatcher, expand_braces, split_negation

# Matcher resolution
from refilter._matcher import (
    FilterError,
    FunctionMatch,
    GlobPatternError,
    InvalidPredicateKind,
    MatcherSpec,
    PatternMatch,
    resolve_matcher,
)

# Predicates
from refilter._predicate import (
    FunctionPredicate,
    Predicate,
    SinglePredicate,
    compile_predicate,
)

# Stages
from refilter._stage import (
    FilterStage,
    RestoreStage,
    Stage,
    StageClosedError,
    StageError,
    chain,
    create_filter,
    load_filter,
)
from refilter._types import DataInput, InputMatcher, MatchingData, Record, Sink
from refilter.files import FileRecord

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Protocols
    "DataInput",
    "InputMatcher",
    "MatchingData",
    "Record",
    "Sink",
    # Records
    "FileRecord",
    # Matcher resolution
    "PatternMatch",
    "FunctionMatch",
    "MatcherSpec",
    "resolve_matcher",
    # Predicates
    "SinglePredicate",
    "FunctionPredicate",
    "Predicate",
    "compile_predicate",
    # Glob
    "GlobMatcher",
    "GlobListMatcher",
    "expand_braces",
    "split_negation",
    # Buffer
    "DiversionBuffer",
    # Stages
    "Stage",
    "FilterStage",
    "RestoreStage",
    "create_filter",
    "load_filter",
    "chain",
    # Config types
    "MatchOptions",
    "RestoreOptions",
    "RestoreOrder",
    "FilterConfig",
    "parse_match_options",
    "parse_restore_options",
    "parse_filter_config",
    # Errors
    "FilterError",
    "InvalidPredicateKind",
    "GlobPatternError",
    "StageError",
    "StageClosedError",
    "BufferDrainedError",
    "ConfigParseError",
]
