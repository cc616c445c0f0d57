"""Unused-package detection by reachability from entry packages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph.algos import build_package_graph, reachable_packages
from validator.violations import Violation, ViolationKind

if TYPE_CHECKING:
    from graph.model import Graph


def entry_directories(graph: Graph, entry_package: str) -> list[str]:
    """Directories holding production files of the entry package."""
    return sorted(
        {
            node.directory
            for node in graph.production_nodes()
            if node.package == entry_package
        }
    )


def validate_unused_packages(
    graph: Graph, entry_package: str = "main"
) -> list[Violation]:
    """Report every production package not reachable from an entry package.

    Reachability follows local imports of production files only. A graph
    without any entry package reports every package as unused.
    """
    roots = entry_directories(graph, entry_package)
    visited = reachable_packages(build_package_graph(graph), roots)

    violations: list[Violation] = []
    for package_dir in graph.local_packages():
        if package_dir in visited:
            continue
        violations.append(
            Violation(
                kind=ViolationKind.UNUSED_PACKAGE,
                file=package_dir,
                message=(
                    f"Package {package_dir} is not reachable from any "
                    f"'{entry_package}' package"
                ),
                rule="Every package must be imported, directly or transitively, by an entry point",
                fix="Remove the package or import it from code that is in use",
            )
        )

    return violations


__all__ = ["entry_directories", "validate_unused_packages"]
