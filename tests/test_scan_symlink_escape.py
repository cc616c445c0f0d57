from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from scan.files import _build_gitignore_matcher, find_go_files

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_go_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "pkg").mkdir()
    (repo_root / "pkg" / "module.go").write_text("package pkg\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "leak.go").write_text("package leak\n", encoding="utf-8")

    symlink_dir = repo_root / "pkg" / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = [
        path.relative_to(repo_root).as_posix()
        for path in find_go_files(repo_root, ["pkg"])
    ]

    assert "pkg/module.go" in results
    assert "pkg/linked/leak.go" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_go_files_skips_symlinked_files(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    (repo_root / "pkg").mkdir(parents=True)
    (repo_root / "pkg" / "module.go").write_text("package pkg\n", encoding="utf-8")

    outside = tmp_path / "outside.go"
    outside.write_text("package outside\n", encoding="utf-8")
    (repo_root / "pkg" / "alias.go").symlink_to(outside)

    results = [
        path.relative_to(repo_root).as_posix()
        for path in find_go_files(repo_root, ["pkg"])
    ]

    assert results == ["pkg/module.go"]


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_symlinked_gitignore_is_not_used(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text("pkg/\n", encoding="utf-8")

    (repo_root / ".gitignore").symlink_to(external_root / "outside.gitignore")

    assert _build_gitignore_matcher(repo_root) is None
