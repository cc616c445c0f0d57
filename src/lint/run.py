"""Single lint run: load, resolve, scan, build, validate, decide."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from graph.builder import build_graph, build_graph_detailed
from rules.config import load_config
from rules.merge import resolve_config
from scan.files import scan_project
from validator.engine import Validator
from validator.verdict import should_fail

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from graph.model import Graph
    from pkgcoverage.report import PackageCoverage
    from rules.config import ResolvedConfig
    from validator.violations import Violation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LintResult:
    config: ResolvedConfig
    graph: Graph
    violations: tuple[Violation, ...] = field(default_factory=tuple)
    failed: bool = False

    @property
    def passed(self) -> bool:
        return not self.failed


def run_lint(
    root: Path,
    *,
    config: ResolvedConfig | None = None,
    coverage: Sequence[PackageCoverage] | None = None,
    detailed: bool = False,
) -> LintResult:
    """Lint the Go project at ``root``.

    Args:
        root: Project root holding layerlint.toml and go.mod
        config: Already resolved configuration; loaded from ``root`` when None
        coverage: Measured package coverage, checked when coverage rules are enabled
        detailed: Record used symbols per import in the graph

    Returns:
        LintResult with the graph, sorted violations and the build verdict.

    Raises:
        ConfigError: If the configuration cannot be loaded or resolved.
        ScanError: If any source file cannot be scanned.
    """
    if config is None:
        config = resolve_config(load_config(root), root=root)

    logger.info(
        "Linting %s (module %s, preset %s)",
        root,
        config.module,
        config.preset_name or "none",
    )

    files = scan_project(
        root,
        config.scan_paths,
        ignore_paths=config.ignore_paths,
        include_tests=config.lint_test_files,
        include_usages=detailed,
    )

    if detailed:
        graph = build_graph_detailed(files, config.module)
    else:
        graph = build_graph(files, config.module)

    violations = Validator(
        config, graph, project_root=root, coverage=coverage
    ).validate()
    failed = should_fail(violations, config)

    logger.info(
        "Found %d violation(s) in %d file(s); build %s",
        len(violations),
        len(graph.nodes),
        "fails" if failed else "passes",
    )
    return LintResult(
        config=config, graph=graph, violations=tuple(violations), failed=failed
    )


__all__ = ["LintResult", "run_lint"]
