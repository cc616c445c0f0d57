"""Directory-import (layering) validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rules.layers import build_allowed_deps, classify_layer, is_violation
from validator.testfiles import is_exempt_test_import
from validator.violations import Violation, ViolationKind

if TYPE_CHECKING:
    from graph.model import Dependency, FileNode, Graph
    from rules.config import ResolvedConfig


def _describe_allowed(layer: str, allowed: set[str]) -> str:
    if not allowed:
        return f"{layer} may not import any local layer"
    return f"{layer} can only import from: {', '.join(sorted(allowed))}"


def _forbidden_import(
    node: FileNode,
    dep: Dependency,
    source_layer: str,
    target_layer: str,
    allowed: set[str],
) -> Violation:
    if source_layer == target_layer:
        fix = (
            "Packages of this layer must not depend on each other; use "
            "interfaces and dependency inversion instead of a direct import"
        )
    else:
        fix = "Restructure dependencies according to the allowed imports"

    return Violation(
        kind=ViolationKind.FORBIDDEN_IMPORT,
        file=node.rel_path,
        message=(
            f"{node.rel_path} imports {dep.local_path} "
            f"(layer {source_layer} -> layer {target_layer})"
        ),
        rule=_describe_allowed(source_layer, allowed),
        fix=fix,
        import_path=dep.import_path,
        source_layer=source_layer,
        target_layer=target_layer,
    )


def validate_directory_imports(graph: Graph, config: ResolvedConfig) -> list[Violation]:
    """Check every local import edge against the directory-import matrix.

    Production files are always checked. Test files are checked only when
    test linting is enabled, and then skip their exempt imports. Edges with
    an unclassified endpoint are never reported.
    """
    directories_import = config.rules.directories_import
    if not directories_import:
        return []

    allowed_deps = build_allowed_deps(directories_import)
    test_policy = config.rules.test_files
    exempt_imports = set(test_policy.exempt_imports)
    violations: list[Violation] = []

    for node in graph.nodes:
        if node.is_test and not test_policy.lint:
            continue

        source_layer = classify_layer(node.directory, allowed_deps)
        if source_layer is None:
            continue

        for dep in node.local_dependencies():
            if node.is_test and is_exempt_test_import(node, dep, exempt_imports):
                continue

            target_layer = classify_layer(dep.local_path, allowed_deps)
            if target_layer is None:
                continue
            if not is_violation(source_layer, target_layer, allowed_deps):
                continue

            violations.append(
                _forbidden_import(
                    node, dep, source_layer, target_layer, allowed_deps[source_layer]
                )
            )

    return violations


__all__ = ["validate_directory_imports"]
