"""Low-coverage violations from measured package coverage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pkgcoverage.report import get_threshold
from validator.violations import Violation, ViolationKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pkgcoverage.report import PackageCoverage
    from rules.config import TestCoverageConfig


def validate_coverage(
    records: Iterable[PackageCoverage],
    module: str,
    policy: TestCoverageConfig,
) -> list[Violation]:
    """Report every package whose coverage is below its resolved threshold."""
    if not policy.enabled:
        return []

    violations: list[Violation] = []
    for record in records:
        threshold = get_threshold(
            record.package_path, module, policy.threshold, policy.package_thresholds
        )
        if record.coverage >= threshold:
            continue

        detail = "" if record.has_tests else " (no test files)"
        violations.append(
            Violation(
                kind=ViolationKind.LOW_COVERAGE,
                file=record.package_path,
                message=(
                    f"Coverage {record.coverage:.1f}% is below the required "
                    f"{threshold:.1f}%{detail}"
                ),
                rule=f"Packages must reach {threshold:.1f}% statement coverage",
                fix="Add tests for the uncovered code paths",
            )
        )

    return violations


__all__ = ["validate_coverage"]
