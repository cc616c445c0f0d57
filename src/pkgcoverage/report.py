"""Package coverage records and hierarchical threshold lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import BaseModel, Field, ValidationError

from utils import ROOT_PACKAGE, strip_module_prefix

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)


class CoverageError(Exception):
    """Raised when a coverage report cannot be read at all."""


class PackageCoverage(BaseModel):
    """Measured statement coverage for one package."""

    package_path: str
    coverage: float = Field(default=0.0, ge=0.0, le=100.0)
    has_tests: bool = False


def parse_coverage_output(output: str) -> tuple[float, bool]:
    """Extract the percentage from ``go test -cover`` output.

    Returns:
        (coverage, has_tests); ``(0.0, False)`` when no coverage line exists.

    Examples:
        >>> parse_coverage_output("ok  example.com/app/pkg  0.01s  coverage: 75.5% of statements")
        (75.5, True)
        >>> parse_coverage_output("?   example.com/app/cmd  [no test files]")
        (0.0, False)
    """
    for line in output.splitlines():
        if "coverage:" not in line:
            continue
        parts = line.split()
        for index, part in enumerate(parts[:-1]):
            if part != "coverage:":
                continue
            try:
                return float(parts[index + 1].rstrip("%")), True
            except ValueError:
                continue
    return 0.0, False


def _coerce_record(raw: Any) -> PackageCoverage | None:
    if not isinstance(raw, dict):
        return None
    package_path = raw.get("package_path")
    if not isinstance(package_path, str) or not package_path:
        return None
    try:
        return PackageCoverage.model_validate(raw)
    except ValidationError as exc:
        logger.warning(
            "Invalid coverage record for %s, treating as untested: %s",
            package_path,
            exc.errors()[0]["msg"],
        )
        return PackageCoverage(package_path=package_path)


def load_coverage_report(path: Path) -> list[PackageCoverage]:
    """Load coverage records from a JSON report.

    The report is either a list of records or an object with a
    ``packages`` list. Each record has ``package_path``, ``coverage`` and
    ``has_tests``. A malformed record degrades to 0% with no tests for
    that package only; records without a package path are dropped.

    Raises:
        CoverageError: If the file cannot be read or is not valid JSON.
    """
    try:
        payload = orjson.loads(path.read_bytes())
    except OSError as exc:
        msg = f"Failed to read coverage report {path}: {exc}"
        raise CoverageError(msg) from exc
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in coverage report {path}: {exc}"
        raise CoverageError(msg) from exc

    if isinstance(payload, dict):
        payload = payload.get("packages", [])
    if not isinstance(payload, list):
        msg = f"Coverage report {path} must contain a list of packages"
        raise CoverageError(msg)

    records: list[PackageCoverage] = []
    for raw in payload:
        record = _coerce_record(raw)
        if record is None:
            logger.warning("Skipping coverage record without package_path: %r", raw)
            continue
        records.append(record)
    return records


def get_threshold(
    package_path: str,
    module: str,
    default_threshold: float,
    package_thresholds: Mapping[str, float],
) -> float:
    """Determine the threshold that applies to a package.

    The module prefix is stripped (the module root becomes ``.``) and the
    remaining path is checked from most to least specific, so a threshold
    for ``cmd`` also covers ``cmd/foo/bar`` unless ``cmd/foo`` has its own.

    Examples:
        >>> get_threshold("mod/cmd/foo/bar", "mod", 70, {"cmd": 40})
        40
        >>> get_threshold("mod/internal/domain", "mod", 70, {"internal": 80, "internal/domain": 90})
        90
        >>> get_threshold("mod/pkg/util", "mod", 70, {"cmd": 40})
        70
    """
    rel_path = strip_module_prefix(package_path, module)
    if rel_path is None:
        rel_path = package_path

    if rel_path == ROOT_PACKAGE:
        return package_thresholds.get(ROOT_PACKAGE, default_threshold)

    parts = rel_path.split("/")
    for depth in range(len(parts), 0, -1):
        prefix = "/".join(parts[:depth])
        if prefix in package_thresholds:
            return package_thresholds[prefix]

    return default_threshold


__all__ = [
    "CoverageError",
    "PackageCoverage",
    "get_threshold",
    "load_coverage_report",
    "parse_coverage_output",
]
