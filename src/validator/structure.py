"""Required project structure checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from utils import is_within, normalize_path
from validator.violations import Violation, ViolationKind

if TYPE_CHECKING:
    from pathlib import Path

    from graph.model import Graph
    from rules.config import StructureConfig

SKIPPED_TOP_LEVEL = frozenset({"vendor", "testdata"})


def _contains_go_code(directory: Path) -> bool:
    return any(
        path.is_file() and not path.name.endswith("_test.go")
        for path in directory.rglob("*.go")
    )


def _is_scanned(graph: Graph, directory: str) -> bool:
    return any(is_within(node.directory, directory) for node in graph.nodes)


def _check_required_directory(
    root: Path, graph: Graph, dir_path: str, purpose: str
) -> Violation | None:
    if purpose:
        rule = f"Directory purpose: {purpose}"
    else:
        rule = "Required by the project structure"
    full_path = root / dir_path

    if not full_path.exists():
        return Violation(
            kind=ViolationKind.MISSING_DIRECTORY,
            file=dir_path,
            message=f"Required directory '{dir_path}' does not exist",
            rule=rule,
            fix=f"Create the directory: mkdir -p {dir_path}",
        )

    if not full_path.is_dir():
        return Violation(
            kind=ViolationKind.MISSING_DIRECTORY,
            file=dir_path,
            message=f"'{dir_path}' exists but is not a directory",
            rule=rule,
            fix=f"Replace the file with a directory: rm {dir_path} && mkdir -p {dir_path}",
        )

    if not _contains_go_code(full_path):
        return Violation(
            kind=ViolationKind.EMPTY_DIRECTORY,
            file=dir_path,
            message=f"Required directory '{dir_path}' contains no .go files",
            rule=rule,
            fix=f"Add Go code to {dir_path} or remove it from required_directories",
        )

    if not _is_scanned(graph, dir_path):
        return Violation(
            kind=ViolationKind.UNUSED_DIRECTORY,
            file=dir_path,
            message=f"Required directory '{dir_path}' contains no scanned Go files",
            rule=rule,
            fix=f"Add {dir_path} to scan_paths or remove it from required_directories",
        )

    return None


def _unexpected_directories(root: Path, required: list[str]) -> list[Violation]:
    violations: list[Violation] = []

    for entry in sorted(root.iterdir()):
        if not entry.is_dir() or entry.is_symlink():
            continue
        name = entry.name
        if name.startswith(".") or name in SKIPPED_TOP_LEVEL:
            continue
        if any(req == name or req.startswith(name + "/") for req in required):
            continue

        violations.append(
            Violation(
                kind=ViolationKind.UNEXPECTED_DIRECTORY,
                file=name,
                message=f"Directory '{name}' is not in the required structure",
                rule="allow_other_directories is false: only required directories are allowed",
                fix="Remove the directory or add it to structure.required_directories",
            )
        )

    return violations


def validate_structure(
    root: Path, graph: Graph, structure: StructureConfig
) -> list[Violation]:
    """Check required directories against the project tree.

    Each required directory yields at most one violation: missing, empty
    (no non-test Go files) or unused (nothing scanned under it). Unless
    other directories are allowed, unlisted top-level directories are
    reported too.
    """
    required = {
        normalize_path(path): purpose
        for path, purpose in structure.required_directories.items()
    }
    if not required:
        return []

    violations: list[Violation] = []
    for dir_path in sorted(required):
        violation = _check_required_directory(root, graph, dir_path, required[dir_path])
        if violation is not None:
            violations.append(violation)

    if not structure.allow_other_directories:
        violations.extend(_unexpected_directories(root, list(required)))

    return violations


__all__ = ["validate_structure"]
