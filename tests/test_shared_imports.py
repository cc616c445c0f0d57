from __future__ import annotations

import pytest

from graph.builder import build_graph
from graph.model import Graph, ScannedFile
from rules.config import ResolvedConfig, RulesConfig, SharedExternalImportsConfig
from validator.shared_imports import is_excluded, validate_shared_imports
from validator.verdict import should_fail
from validator.violations import ViolationKind

MODULE = "mod"
LAYERS = {"cmd": ["internal"], "internal": []}


def _file(rel_path: str, package: str, *imports: str, is_test: bool = False) -> ScannedFile:
    return ScannedFile(
        rel_path=rel_path,
        package=package,
        base_name=rel_path.rsplit("/", 1)[-1].removesuffix(".go"),
        is_test=is_test,
        imports=list(imports),
    )


def _config(**shared: object) -> ResolvedConfig:
    return ResolvedConfig(
        module=MODULE,
        rules=RulesConfig(
            directories_import=LAYERS,
            shared_external_imports=SharedExternalImportsConfig.model_validate(
                {"detect": True, **shared}
            ),
        ),
    )


def _shared_graph() -> Graph:
    return build_graph(
        [
            _file("cmd/main.go", "main", "github.com/x/lib", "mod/internal/repo"),
            _file("internal/repo/repo.go", "repo", "github.com/x/lib"),
        ],
        MODULE,
    )


def test_import_shared_by_two_layers_warns_and_passes() -> None:
    config = _config(mode="warn")

    violations = validate_shared_imports(
        _shared_graph(), LAYERS, config.rules.shared_external_imports
    )

    assert len(violations) == 1
    violation = violations[0]
    assert violation.kind is ViolationKind.SHARED_EXTERNAL_IMPORT
    assert violation.import_path == "github.com/x/lib"
    assert "github.com/x/lib" in violation.message
    assert "2 layers" in violation.message
    assert violation.layer_count == 2
    assert violation.file == "cmd/main.go"
    assert violation.files == ["cmd/main.go", "internal/repo/repo.go"]
    assert should_fail(violations, config) is False


def test_import_shared_by_two_layers_fails_in_error_mode() -> None:
    config = _config(mode="error")

    violations = validate_shared_imports(
        _shared_graph(), LAYERS, config.rules.shared_external_imports
    )

    assert [v.import_path for v in violations] == ["github.com/x/lib"]
    assert should_fail(violations, config) is True


@pytest.mark.parametrize(
    "shared",
    [
        {"exclusions": ["github.com/x/lib"]},
        {"exclusion_patterns": ["github.com/x/*"]},
        {"exclusion_patterns": ["github.com/*/lib"]},
    ],
)
def test_excluded_import_is_not_reported(shared: dict[str, list[str]]) -> None:
    config = _config(**shared)

    violations = validate_shared_imports(
        _shared_graph(), LAYERS, config.rules.shared_external_imports
    )

    assert violations == []


def test_same_layer_consumers_are_not_reported() -> None:
    graph = build_graph(
        [
            _file("internal/a/a.go", "a", "github.com/x/lib"),
            _file("internal/b/b.go", "b", "github.com/x/lib"),
        ],
        MODULE,
    )
    config = _config()

    assert validate_shared_imports(graph, LAYERS, config.rules.shared_external_imports) == []


def test_test_files_count_as_consumers() -> None:
    graph = build_graph(
        [
            _file("cmd/main.go", "main", "github.com/x/lib"),
            _file("internal/a/a_test.go", "a_test", "github.com/x/lib", is_test=True),
        ],
        MODULE,
    )
    config = _config()

    violations = validate_shared_imports(
        graph, LAYERS, config.rules.shared_external_imports
    )

    assert len(violations) == 1
    assert violations[0].files == ["cmd/main.go", "internal/a/a_test.go"]
    assert "2 layers (cmd, internal)" in violations[0].message


def test_unclassified_files_are_not_consumers() -> None:
    graph = build_graph(
        [
            _file("cmd/main.go", "main", "github.com/x/lib"),
            _file("tools/gen/gen.go", "main", "github.com/x/lib"),
        ],
        MODULE,
    )
    config = _config()

    assert validate_shared_imports(graph, LAYERS, config.rules.shared_external_imports) == []


def test_detection_disabled_reports_nothing() -> None:
    policy = SharedExternalImportsConfig(detect=False)

    assert validate_shared_imports(_shared_graph(), LAYERS, policy) == []


def test_is_excluded_prefix_pattern_matches_bare_prefix() -> None:
    assert is_excluded("encoding", [], ["encoding/*"]) is True
    assert is_excluded("encoding/json", [], ["encoding/*"]) is True
    assert is_excluded("encodings", [], ["encoding/*"]) is False
