"""File scanning utilities for layerlint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from graph.model import ImportUsage, ScannedFile
from parse.go_source import SourceParseError, parse_go_file
from utils import is_within, normalize_path

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

GO_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"


class ScanError(Exception):
    """Raised when the source tree cannot be scanned completely."""


def _is_ignored(rel_path: str, ignore_paths: list[str]) -> bool:
    return any(
        normalize_path(ignore) != "." and is_within(rel_path, ignore)
        for ignore in ignore_paths
    )


def _should_include_file(
    path: Path,
    directory: Path,
    ignore_paths: list[str],
    gitignore_matches: Callable[[str], bool] | None,
    *,
    include_tests: bool,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, directory):
        return False

    if not include_tests and path.name.endswith(TEST_SUFFIX):
        return False

    try:
        rel_path = path.relative_to(directory)
    except ValueError:
        return False

    if any(part.startswith(".") for part in rel_path.parts[:-1]):
        return False

    if _is_ignored(rel_path.as_posix(), ignore_paths):
        return False

    return not (gitignore_matches is not None and gitignore_matches(str(path)))


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _build_gitignore_matcher(root: Path) -> Callable[[str], bool] | None:
    gitignore_path = root / ".gitignore"
    if gitignore_path.is_file() and not gitignore_path.is_symlink():
        return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
    return None


def find_go_files(
    directory: Path,
    scan_paths: list[str],
    *,
    ignore_paths: list[str] | None = None,
    include_tests: bool = True,
) -> Iterator[Path]:
    """Find Go files under the configured scan paths, respecting .gitignore.

    Args:
        directory: Project root
        scan_paths: Root-relative directories to walk; missing ones are skipped
        ignore_paths: Root-relative directories whose contents are skipped
        include_tests: Whether *_test.go files are yielded

    Yields:
        Path objects for each Go file found, sorted lexicographically
        by relative path for deterministic ordering.
    """
    gitignore_matches = _build_gitignore_matcher(directory)
    ignore = ignore_paths or []

    matched: dict[str, Path] = {}
    for scan_path in scan_paths:
        base = directory / normalize_path(scan_path)
        if not base.is_dir():
            logger.debug("Scan path %s does not exist, skipping", base)
            continue
        for path in base.rglob(f"*{GO_SUFFIX}"):
            if _should_include_file(
                path,
                directory,
                ignore,
                gitignore_matches,
                include_tests=include_tests,
            ):
                matched[path.relative_to(directory).as_posix()] = path

    for rel_path in sorted(matched):
        yield matched[rel_path]


def scan_file(path: Path, root: Path, *, include_usages: bool = False) -> ScannedFile:
    """Parse one Go file into a ScannedFile record."""
    rel_path = path.relative_to(root).as_posix()
    parsed = parse_go_file(path, include_usages=include_usages)

    import_usages: list[ImportUsage] | None = None
    if include_usages:
        import_usages = [
            ImportUsage(import_path=import_path, used_symbols=symbols)
            for import_path, symbols in sorted(parsed.used_symbols.items())
        ]

    return ScannedFile(
        rel_path=rel_path,
        package=parsed.package,
        base_name=path.name[: -len(GO_SUFFIX)],
        is_test=path.name.endswith(TEST_SUFFIX),
        imports=parsed.imports,
        import_usages=import_usages,
    )


def scan_project(
    root: Path,
    scan_paths: list[str],
    *,
    ignore_paths: list[str] | None = None,
    include_tests: bool = True,
    include_usages: bool = False,
) -> list[ScannedFile]:
    """Scan all Go files of a project.

    Raises:
        ScanError: If any file cannot be read or parsed. No partial result
            is returned.
    """
    files: list[ScannedFile] = []
    for path in find_go_files(
        root,
        scan_paths,
        ignore_paths=ignore_paths,
        include_tests=include_tests,
    ):
        try:
            files.append(scan_file(path, root, include_usages=include_usages))
        except (OSError, SourceParseError) as exc:
            msg = f"Failed to scan {path.relative_to(root).as_posix()}: {exc}"
            raise ScanError(msg) from exc

    logger.debug("Scanned %d Go files under %s", len(files), root)
    return files


__all__ = [
    "ScanError",
    "_build_gitignore_matcher",
    "_should_include_file",
    "find_go_files",
    "scan_file",
    "scan_project",
]
