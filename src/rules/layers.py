"""Layer classification and violation detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from utils import normalize_path, path_segments

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def classify_layer(directory: str, prefixes: Iterable[str]) -> str | None:
    """Classify a package directory into an architectural layer.

    Uses longest-prefix semantics over whole path segments: among the
    configured prefixes, the one matching the most leading segments of the
    directory wins. ``internal/domain`` therefore beats ``internal`` for
    ``internal/domain/user``, while ``internal/dom`` matches neither.

    Returns:
        The winning prefix, or None when the directory is unclassified.
    """
    segments = path_segments(directory)
    best: str | None = None
    best_depth = 0

    for prefix in prefixes:
        prefix_segments = path_segments(prefix)
        depth = len(prefix_segments)
        if depth > len(segments) or depth <= best_depth:
            continue
        if segments[:depth] == prefix_segments:
            best = prefix
            best_depth = depth

    return best


def build_allowed_deps(
    directories_import: Mapping[str, Iterable[str]],
) -> dict[str, set[str]]:
    """Build a mapping of layer -> set of allowed dependency layers.

    Layer names are normalized (``./cmd/`` becomes ``cmd``) on both sides, so
    spelling variants of one directory name the same layer.
    """
    allowed_deps: dict[str, set[str]] = {}
    for layer, allowed in directories_import.items():
        allowed_deps.setdefault(normalize_path(layer), set()).update(
            normalize_path(target) for target in allowed
        )
    return allowed_deps


def is_violation(
    from_layer: str | None,
    to_layer: str | None,
    allowed_deps: Mapping[str, set[str]],
) -> bool:
    """Check if a dependency from one layer to another is a violation.

    Unclassified endpoints are exempt. The allowed set is closed: a layer
    that does not list itself may not import other packages of its own layer.
    """
    if from_layer is None or to_layer is None:
        return False

    return to_layer not in allowed_deps.get(from_layer, set())


__all__ = ["build_allowed_deps", "classify_layer", "is_violation"]
