"""Shared path utilities for layerlint."""

from __future__ import annotations

from pathlib import PurePosixPath

ROOT_PACKAGE = "."


def normalize_path(path: str) -> str:
    """Normalize a project-relative path to slash-separated form.

    Examples:
        >>> normalize_path("internal\\\\app\\\\service.go")
        'internal/app/service.go'
        >>> normalize_path("./cmd/tool/")
        'cmd/tool'
        >>> normalize_path("")
        '.'
    """
    parts = [part for part in path.replace("\\", "/").split("/") if part not in ("", ".")]
    if not parts:
        return ROOT_PACKAGE
    return "/".join(parts)


def file_dir(rel_path: str) -> str:
    """Return the package directory of a file path (``.`` for the project root).

    Examples:
        >>> file_dir("internal/app/service.go")
        'internal/app'
        >>> file_dir("main.go")
        '.'
    """
    parent = PurePosixPath(normalize_path(rel_path)).parent.as_posix()
    return normalize_path(parent)


def path_segments(path: str) -> list[str]:
    """Split a directory path into segments; the root maps to ``["."]``."""
    normalized = normalize_path(path)
    if normalized == ROOT_PACKAGE:
        return [ROOT_PACKAGE]
    return normalized.split("/")


def strip_module_prefix(import_path: str, module: str) -> str | None:
    """Return the module-relative path of an import, or None when external.

    Examples:
        >>> strip_module_prefix("example.com/app/internal/core", "example.com/app")
        'internal/core'
        >>> strip_module_prefix("example.com/app", "example.com/app")
        '.'
        >>> strip_module_prefix("example.com/application", "example.com/app") is None
        True
    """
    if not module:
        return None
    if import_path == module:
        return ROOT_PACKAGE
    prefix = module + "/"
    if import_path.startswith(prefix):
        return import_path[len(prefix) :]
    return None


def is_within(path: str, directory: str) -> bool:
    """Check whether ``path`` equals ``directory`` or lives below it."""
    path = normalize_path(path)
    directory = normalize_path(directory)
    if directory == ROOT_PACKAGE:
        return True
    return path == directory or path.startswith(directory + "/")
