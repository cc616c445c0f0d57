"""Determinism verification for layerlint reports."""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson

from lint.report import write_report
from lint.run import run_lint

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pkgcoverage.report import PackageCoverage

REPORT_FILENAME = "report.json"


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)


def _load_saved(path: Path) -> dict[str, Any] | None:
    try:
        payload = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def verify_determinism(
    *,
    root: Path,
    report_path: Path,
    coverage: Sequence[PackageCoverage] | None = None,
) -> DeterminismResult:
    """Verify that a saved JSON report matches a fresh lint run.

    Re-runs the lint, writes the new report into a temporary directory and
    compares it byte-for-byte against ``report_path``. The graph is
    included in the new report only when the saved one carries it.

    Args:
        root: Project root to lint.
        report_path: Previously written JSON report.
        coverage: Coverage records used for the saved report, if any.

    Returns:
        DeterminismResult with ok status and the top-level report keys that
        differ (``<invalid report>`` when the saved file is not a report,
        ``<formatting>`` when only the serialization differs).

    Raises:
        FileNotFoundError: If report_path does not exist.
        IsADirectoryError: If report_path is a directory.
    """
    if not report_path.exists():
        msg = f"Report file does not exist: {report_path}"
        raise FileNotFoundError(msg)
    if report_path.is_dir():
        msg = f"Report path is a directory: {report_path}"
        raise IsADirectoryError(msg)

    saved = _load_saved(report_path)
    include_graph = saved is not None and "graph" in saved
    result = run_lint(root, coverage=coverage, detailed=include_graph)

    with tempfile.TemporaryDirectory() as temp_dir:
        regenerated_path = Path(temp_dir) / REPORT_FILENAME
        write_report(regenerated_path, result, include_graph=include_graph)

        if filecmp.cmp(report_path, regenerated_path, shallow=False):
            return DeterminismResult(ok=True)

        regenerated = orjson.loads(regenerated_path.read_bytes())

    if saved is None:
        return DeterminismResult(ok=False, mismatches=("<invalid report>",))

    mismatches = sorted(
        key
        for key in set(saved) | set(regenerated)
        if saved.get(key) != regenerated.get(key)
    )
    return DeterminismResult(ok=False, mismatches=tuple(mismatches) or ("<formatting>",))


__all__ = ["DeterminismResult", "verify_determinism"]
