"""Build verdict: does a set of violations fail the build?"""

from __future__ import annotations

from typing import TYPE_CHECKING

from validator.violations import ViolationKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rules.config import ResolvedConfig
    from validator.violations import Violation


def should_fail(violations: Sequence[Violation], config: ResolvedConfig) -> bool:
    """Return True when the violations must fail the build.

    Shared external import violations are advisory in ``warn`` mode: a run
    whose only violations are of that kind passes. Any other violation
    fails.
    """
    if not violations:
        return False

    if config.shared_imports_mode != "warn":
        return True

    return any(v.kind is not ViolationKind.SHARED_EXTERNAL_IMPORT for v in violations)


__all__ = ["should_fail"]
