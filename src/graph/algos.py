"""Graph algorithms for layerlint."""

from __future__ import annotations

from collections import defaultdict, deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from graph.model import Graph


def build_package_graph(graph: Graph) -> dict[str, set[str]]:
    """Build a package -> imported local packages mapping.

    Edges from test files are left out so that tests cannot keep a
    package alive.

    Args:
        graph: Dependency graph built from scanned files

    Returns:
        Dictionary keyed by package directory with the set of local
        packages its production files import
    """
    packages: dict[str, set[str]] = defaultdict(set)

    for node in graph.production_nodes():
        targets = packages[node.directory]
        for dep in node.local_dependencies():
            targets.add(dep.local_path)

    return dict(packages)


def reachable_packages(
    package_graph: dict[str, set[str]], roots: Iterable[str]
) -> set[str]:
    """Return every package reachable from ``roots`` (roots included)."""
    visited: set[str] = set()
    queue: deque[str] = deque()

    for root in sorted(set(roots)):
        visited.add(root)
        queue.append(root)

    while queue:
        current = queue.popleft()
        for neighbor in sorted(package_graph.get(current, set())):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)

    return visited


__all__ = ["build_package_graph", "reachable_packages"]
