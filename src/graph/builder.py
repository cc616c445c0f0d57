"""Dependency graph construction from scanned files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph.model import Dependency, FileNode, Graph
from utils import normalize_path, strip_module_prefix

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from graph.model import ScannedFile


def classify_import(
    import_path: str,
    module: str,
    used_symbols: Iterable[str] = (),
) -> Dependency:
    """Classify one raw import as local to ``module`` or external."""
    local_path = strip_module_prefix(import_path, module)
    if local_path is None:
        return Dependency(
            import_path=import_path,
            is_local=False,
            used_symbols=tuple(used_symbols),
        )
    return Dependency(
        import_path=import_path,
        is_local=True,
        local_path=local_path,
        used_symbols=tuple(used_symbols),
    )


def _build_node(
    file: ScannedFile,
    module: str,
    usages: Mapping[str, list[str]] | None = None,
) -> FileNode:
    dependencies = tuple(
        classify_import(imp, module, (usages or {}).get(imp, ()))
        for imp in file.imports
    )
    return FileNode(
        rel_path=normalize_path(file.rel_path),
        package=file.package,
        base_name=file.base_name,
        is_test=file.is_test,
        dependencies=dependencies,
    )


def build_graph(files: Iterable[ScannedFile], module: str) -> Graph:
    """Build a dependency graph, one node per file in scanner order.

    Import order within a file is preserved and identical imports in
    different files stay separate Dependency instances.
    """
    return Graph(
        module=module,
        nodes=tuple(_build_node(file, module) for file in files),
    )


def build_graph_detailed(files: Iterable[ScannedFile], module: str) -> Graph:
    """Build a dependency graph carrying per-import used symbols.

    Symbols come from ``ScannedFile.import_usages``; they are informational
    and never consulted by the validators.
    """
    nodes: list[FileNode] = []
    for file in files:
        usages = {
            usage.import_path: list(usage.used_symbols)
            for usage in file.import_usages or []
        }
        nodes.append(_build_node(file, module, usages))
    return Graph(module=module, nodes=tuple(nodes))


__all__ = ["build_graph", "build_graph_detailed", "classify_import"]
