"""Validator orchestration: run every enabled rule against one graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from validator.coverage import validate_coverage
from validator.directories import validate_directory_imports
from validator.shared_imports import validate_shared_imports
from validator.structure import validate_structure
from validator.test_naming import validate_test_naming
from validator.testfiles import validate_test_files
from validator.unused import validate_unused_packages
from validator.violations import sort_violations

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from graph.model import Graph
    from pkgcoverage.report import PackageCoverage
    from rules.config import ResolvedConfig
    from validator.violations import Violation


class Validator:
    """Evaluates the configured architectural rules against a graph."""

    def __init__(
        self,
        config: ResolvedConfig,
        graph: Graph,
        *,
        project_root: Path | None = None,
        coverage: Sequence[PackageCoverage] | None = None,
    ) -> None:
        self.config = config
        self.graph = graph
        self.project_root = project_root
        self.coverage = coverage

    def validate(self) -> list[Violation]:
        """Run all enabled validators.

        Returns:
            Violations in deterministic (file, kind, import, message) order.
        """
        rules = self.config.rules
        violations: list[Violation] = []

        if self.project_root is not None:
            violations.extend(
                validate_structure(self.project_root, self.graph, self.config.structure)
            )

        violations.extend(validate_directory_imports(self.graph, self.config))

        if rules.detect_unused:
            violations.extend(
                validate_unused_packages(self.graph, self.config.entry_package)
            )

        violations.extend(
            validate_shared_imports(
                self.graph, rules.directories_import, rules.shared_external_imports
            )
        )

        violations.extend(validate_test_files(self.graph, self.config))

        if rules.strict_test_naming and rules.test_files.lint:
            violations.extend(validate_test_naming(self.graph))

        if self.coverage:
            violations.extend(
                validate_coverage(self.coverage, self.config.module, rules.test_coverage)
            )

        return sort_violations(violations)


__all__ = ["Validator"]
