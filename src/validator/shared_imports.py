"""Detection of external packages imported from more than one layer."""

from __future__ import annotations

from collections import defaultdict
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING

from rules.layers import build_allowed_deps, classify_layer
from validator.violations import Violation, ViolationKind

if TYPE_CHECKING:
    from graph.model import Graph
    from rules.config import SharedExternalImportsConfig


def is_excluded(import_path: str, exclusions: list[str], patterns: list[str]) -> bool:
    """Check an import against the exact exclusions and glob patterns.

    A pattern ending in ``/*`` also matches its bare prefix, so
    ``encoding/*`` covers ``encoding`` as well as ``encoding/json``.

    Examples:
        >>> is_excluded("encoding/json", [], ["encoding/*"])
        True
        >>> is_excluded("encoding", [], ["encoding/*"])
        True
        >>> is_excluded("net/http", ["fmt"], ["encoding/*"])
        False
    """
    if import_path in exclusions:
        return True
    for pattern in patterns:
        if fnmatchcase(import_path, pattern):
            return True
        if pattern.endswith("/*") and import_path == pattern[:-2]:
            return True
    return False


def validate_shared_imports(
    graph: Graph,
    directories_import: dict[str, list[str]],
    policy: SharedExternalImportsConfig,
) -> list[Violation]:
    """Report external imports consumed by two or more layers."""
    if not policy.detect or not directories_import:
        return []

    allowed_deps = build_allowed_deps(directories_import)
    layers_by_import: dict[str, set[str]] = defaultdict(set)
    files_by_import: dict[str, set[str]] = defaultdict(set)

    for node in graph.nodes:
        layer = classify_layer(node.directory, allowed_deps)
        if layer is None:
            continue
        for dep in node.external_dependencies():
            layers_by_import[dep.import_path].add(layer)
            files_by_import[dep.import_path].add(node.rel_path)

    violations: list[Violation] = []
    for import_path in sorted(layers_by_import):
        layers = layers_by_import[import_path]
        if len(layers) < 2:
            continue
        if is_excluded(import_path, policy.exclusions, policy.exclusion_patterns):
            continue

        files = sorted(files_by_import[import_path])
        violations.append(
            Violation(
                kind=ViolationKind.SHARED_EXTERNAL_IMPORT,
                file=files[0],
                message=(
                    f"External package '{import_path}' imported by {len(layers)} "
                    f"layers ({', '.join(sorted(layers))})"
                ),
                rule="External dependencies should be owned by a single layer",
                fix=(
                    "Wrap the dependency behind an interface in one layer, or add it "
                    "to shared_external_imports.exclusions"
                ),
                import_path=import_path,
                layer_count=len(layers),
                files=files,
            )
        )

    return violations


__all__ = ["is_excluded", "validate_shared_imports"]
