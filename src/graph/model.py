"""Dependency graph models shared by the scanner, validators and reports."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from utils import file_dir


class ImportUsage(BaseModel):
    """Symbols a file uses from one import (detailed mode only)."""

    import_path: str
    used_symbols: list[str] = Field(default_factory=list)


class ScannedFile(BaseModel):
    """One source file as reported by the scanner."""

    rel_path: str
    package: str
    base_name: str
    is_test: bool = False
    imports: list[str] = Field(default_factory=list)
    import_usages: list[ImportUsage] | None = None


@dataclass(frozen=True)
class Dependency:
    import_path: str
    is_local: bool
    local_path: str = ""
    used_symbols: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileNode:
    rel_path: str
    package: str
    base_name: str
    is_test: bool
    dependencies: tuple[Dependency, ...] = ()

    @property
    def directory(self) -> str:
        return file_dir(self.rel_path)

    def local_dependencies(self) -> list[Dependency]:
        return [dep for dep in self.dependencies if dep.is_local]

    def external_dependencies(self) -> list[Dependency]:
        return [dep for dep in self.dependencies if not dep.is_local]


@dataclass(frozen=True)
class Graph:
    module: str
    nodes: tuple[FileNode, ...] = field(default_factory=tuple)

    def production_nodes(self) -> list[FileNode]:
        return [node for node in self.nodes if not node.is_test]

    def test_nodes(self) -> list[FileNode]:
        return [node for node in self.nodes if node.is_test]

    def local_packages(self) -> list[str]:
        """Sorted package directories that contain production files."""
        return sorted({node.directory for node in self.production_nodes()})

    def to_dict(self) -> dict[str, object]:
        return {
            "module": self.module,
            "nodes": [
                {
                    "path": node.rel_path,
                    "package": node.package,
                    "base_name": node.base_name,
                    "is_test": node.is_test,
                    "dependencies": [
                        {
                            "import_path": dep.import_path,
                            "is_local": dep.is_local,
                            "local_path": dep.local_path,
                            "used_symbols": list(dep.used_symbols),
                        }
                        for dep in node.dependencies
                    ],
                }
                for node in self.nodes
            ],
        }


__all__ = ["Dependency", "FileNode", "Graph", "ImportUsage", "ScannedFile"]
