"""Fixture loader for refilter.

Loads YAML fixtures from tests/fixtures/ and converts them to refilter
types for parametrized testing. Handles both glob format (01) and pipeline
format (02).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from refilter import (
    FilterStage,
    GlobListMatcher,
    Stage,
    load_filter,
    parse_filter_config,
    parse_match_options,
)

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class GlobCase:
    """A single path check from a glob fixture."""

    fixture_name: str
    case_name: str
    matcher: GlobListMatcher
    path: str
    expect: bool


@dataclass
class PipelineCase:
    """A wired pipeline plus the records to push through it."""

    fixture_name: str
    head: Stage[Any]
    tail: Stage[Any]
    filters: dict[str, FilterStage[Any]]
    input: list[str]
    expect: list[str]


# ─── Glob fixtures ──────────────────────────────────────────────────────────


def load_glob_fixtures() -> list[GlobCase]:
    """Load all glob fixtures (01_glob)."""
    cases: list[GlobCase] = []
    for yaml_file in sorted((FIXTURES_DIR / "01_glob").glob("*.yaml")):
        cases.extend(_load_glob_file(yaml_file))
    return cases


def _load_glob_file(path: Path) -> list[GlobCase]:
    """Load a single glob fixture YAML file (may contain multiple documents)."""
    cases: list[GlobCase] = []
    with path.open() as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            patterns = doc["patterns"] if "patterns" in doc else [doc["pattern"]]
            matcher = GlobListMatcher(
                patterns=tuple(patterns),
                options=parse_match_options(doc.get("options")),
            )
            for case in doc["cases"]:
                cases.append(
                    GlobCase(
                        fixture_name=doc["name"],
                        case_name=case["name"],
                        matcher=matcher,
                        path=str(case["path"]),
                        expect=bool(case["expect"]),
                    )
                )
    return cases


# ─── Pipeline fixtures ──────────────────────────────────────────────────────


def load_pipeline_fixture_docs() -> list[dict[str, Any]]:
    """Load raw pipeline fixture documents (02_pipeline).

    Pipelines are stateful and single-use, so tests build a fresh one from
    the raw document with build_pipeline() rather than sharing instances.
    """
    docs: list[dict[str, Any]] = []
    for yaml_file in sorted((FIXTURES_DIR / "02_pipeline").glob("*.yaml")):
        with yaml_file.open() as f:
            for doc in yaml.safe_load_all(f):
                if doc is None:
                    continue
                doc["_source"] = yaml_file.name
                docs.append(doc)
    return docs


def build_pipeline(doc: dict[str, Any]) -> PipelineCase:
    """Wire a pipeline fixture document into stages.

    ``pipeline`` entries are either a filter name or a mapping
    ``{restore: <filter name>, order: ..., end: ...}``.
    """
    filters = {
        name: load_filter(parse_filter_config(spec)) for name, spec in doc["filters"].items()
    }

    stages: list[Stage[Any]] = []
    for entry in doc["pipeline"]:
        if isinstance(entry, str):
            stages.append(filters[entry])
        else:
            options = {k: v for k, v in entry.items() if k != "restore"}
            stages.append(filters[entry["restore"]].restore(options))

    head = stages[0]
    tail = head
    for stage in stages[1:]:
        tail = tail.pipe(stage)

    return PipelineCase(
        fixture_name=doc["name"],
        head=head,
        tail=tail,
        filters=filters,
        input=[str(p) for p in doc["input"]],
        expect=[str(p) for p in doc["expect"]],
    )


def fixture_id(doc: dict[str, Any]) -> str:
    """Generate a readable test ID from a fixture document."""
    return f"{doc.get('_source', 'unknown')}::{doc.get('name', 'unnamed')}"
