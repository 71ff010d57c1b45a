"""Linting API.

Entry points that tie the engine together: resolve a configuration once,
walk each component tree, aggregate its findings into a report.

Examples
--------
>>> from uilint.api.linting import lint_source
>>> reports = lint_source('''
... name: login
... body: []
... ''')
>>> [f.rule_id for f in reports[0].findings]
['pascal-case-component-name']
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from uilint.compiler.tree_loader import load_components, load_file
from uilint.kernel.config.models import LintConfig
from uilint.kernel.domain.structure import ComponentNode
from uilint.kernel.linting.aggregator import aggregate
from uilint.kernel.linting.models import Report
from uilint.kernel.linting.registry import RuleRegistry, resolve
from uilint.kernel.linting.walker import walk
from uilint.kernel.logging import clear_correlation_id, get_logger, set_correlation_id

logger = get_logger(__name__)

DEFAULT_CONCURRENCY = 8


def unit_name(tree: ComponentNode, source: str | None = None) -> str:
    """Name of the source unit a component's report belongs to."""
    return f"{source}::{tree.name}" if source else tree.name


def lint_component(
    tree: ComponentNode,
    registry: RuleRegistry | None = None,
    source: str | None = None,
) -> Report:
    """Lint one component tree.

    Parameters
    ----------
    tree : ComponentNode
        Structural model to inspect
    registry : RuleRegistry | None
        Resolved rules; the default configuration when omitted
    source : str | None
        Name of the file the tree came from, used to name the report
    """
    registry = registry if registry is not None else resolve()
    name = unit_name(tree, source)
    set_correlation_id(name)
    try:
        return aggregate(walk(tree, registry), source=name)
    finally:
        clear_correlation_id()


async def lint_many(
    trees: Sequence[ComponentNode],
    registry: RuleRegistry | None = None,
    *,
    sources: Sequence[str | None] | None = None,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[Report]:
    """Lint several trees concurrently, one independent unit per tree.

    The registry is resolved once and shared by every unit. Reports come
    back in the order of ``trees``. Cancelling the call discards the
    findings of every unfinished unit; a unit's findings only ever reach
    its own report.

    Parameters
    ----------
    trees : Sequence[ComponentNode]
        Trees to lint
    registry : RuleRegistry | None
        Resolved rules shared by all units
    sources : Sequence[str | None] | None
        Per-tree source names (same length as ``trees``)
    concurrency : int
        Maximum number of units running at the same time
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be positive, got {concurrency}")
    if sources is not None and len(sources) != len(trees):
        raise ValueError("sources must have one entry per tree")

    shared = registry if registry is not None else resolve()
    names = list(sources) if sources is not None else [None] * len(trees)
    semaphore = asyncio.Semaphore(concurrency)

    async def run_unit(tree: ComponentNode, source: str | None) -> Report:
        async with semaphore:
            return await asyncio.to_thread(lint_component, tree, shared, source)

    logger.debug("Linting {count} tree(s), concurrency={n}", count=len(trees), n=concurrency)
    reports = await asyncio.gather(*(run_unit(t, s) for t, s in zip(trees, names, strict=True)))
    return list(reports)


def lint_source(
    text: str,
    source: str = "<string>",
    config: LintConfig | None = None,
) -> list[Report]:
    """Parse a structural document and lint every component in it.

    Raises
    ------
    ParseError
        If the document is malformed (no rule runs)
    ConfigError
        If the configuration is invalid (no rule runs)
    """
    registry = resolve(config)
    trees = load_components(text, source)
    return [lint_component(tree, registry, source) for tree in trees]


def lint_files(
    paths: Sequence[str | Path],
    config: LintConfig | None = None,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[Report]:
    """Load structural documents from disk and lint them concurrently.

    Every file is parsed and the configuration resolved before any rule
    runs, so input and configuration errors abort the whole call.
    """
    registry = resolve(config)
    trees: list[ComponentNode] = []
    sources: list[str | None] = []
    for path in paths:
        for tree in load_file(path):
            trees.append(tree)
            sources.append(str(path))
    return asyncio.run(lint_many(trees, registry, sources=sources, concurrency=concurrency))
