from __future__ import annotations

from graph.builder import build_graph
from graph.model import ScannedFile
from rules.config import (
    ResolvedConfig,
    RulesConfig,
    SharedExternalImportsConfig,
    TestFilesConfig,
)
from validator.engine import Validator
from validator.violations import ViolationKind

MODULE = "mod"


def _file(rel_path: str, package: str, *imports: str) -> ScannedFile:
    base_name = rel_path.rsplit("/", 1)[-1].removesuffix(".go")
    return ScannedFile(
        rel_path=rel_path,
        package=package,
        base_name=base_name,
        is_test=base_name.endswith("_test"),
        imports=list(imports),
    )


def _scenario() -> tuple[ResolvedConfig, list[ScannedFile]]:
    config = ResolvedConfig(
        module=MODULE,
        rules=RulesConfig(
            directories_import={"cmd": ["pkg"], "pkg": [], "internal": []},
            detect_unused=True,
            strict_test_naming=True,
            shared_external_imports=SharedExternalImportsConfig(detect=True),
            test_files=TestFilesConfig(lint=True, require_blackbox=True),
        ),
    )
    files = [
        _file("pkg/b/b.go", "b", "github.com/x/lib"),
        _file(
            "cmd/app/main.go",
            "main",
            "mod/pkg/a",
            "mod/internal/db",
            "github.com/x/lib",
        ),
        _file("pkg/a/a.go", "a", "mod/pkg/b"),
        _file("pkg/a/orphan_test.go", "a"),
        _file("internal/db/db.go", "db"),
        _file("internal/unused/unused.go", "unused"),
    ]
    return config, files


def test_validate_collects_every_enabled_rule_in_sorted_order() -> None:
    config, files = _scenario()

    violations = Validator(config, build_graph(files, MODULE)).validate()

    assert [(v.file, v.kind) for v in violations] == [
        ("cmd/app/main.go", ViolationKind.FORBIDDEN_IMPORT),
        ("cmd/app/main.go", ViolationKind.SHARED_EXTERNAL_IMPORT),
        ("internal/unused", ViolationKind.UNUSED_PACKAGE),
        ("pkg/a/a.go", ViolationKind.FORBIDDEN_IMPORT),
        ("pkg/a/orphan_test.go", ViolationKind.TEST_NAMING_ORPHAN),
        ("pkg/a/orphan_test.go", ViolationKind.WHITEBOX_TEST),
    ]


def test_validate_twice_is_byte_identical() -> None:
    config, files = _scenario()
    graph = build_graph(files, MODULE)

    first = [v.model_dump_json() for v in Validator(config, graph).validate()]
    second = [v.model_dump_json() for v in Validator(config, graph).validate()]

    assert first == second


def test_validate_independent_of_scan_order() -> None:
    config, files = _scenario()

    forward = Validator(config, build_graph(files, MODULE)).validate()
    backward = Validator(config, build_graph(list(reversed(files)), MODULE)).validate()

    assert forward == backward
