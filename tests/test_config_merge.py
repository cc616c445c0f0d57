from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import (
    ConfigError,
    RulesConfig,
    TestCoverageConfig,
    TestFilesConfig,
    parse_config_document,
)
from rules.merge import (
    merge_flag,
    merge_maps,
    merge_rules,
    merge_string,
    merge_threshold,
    merge_unique,
    resolve_config,
)
from rules.presets import get_preset


def test_merge_maps_adds_and_replaces_entries() -> None:
    base = {"cmd": ["pkg"], "pkg": []}
    override = {"pkg": ["internal"], "internal": []}

    assert merge_maps(base, override) == {
        "cmd": ["pkg"],
        "pkg": ["internal"],
        "internal": [],
    }
    assert base == {"cmd": ["pkg"], "pkg": []}


def test_merge_unique_keeps_base_order_first() -> None:
    assert merge_unique(["fmt", "time"], ["uuid", "fmt"]) == ["fmt", "time", "uuid"]


def test_merge_string_empty_override_keeps_base() -> None:
    assert merge_string("warn", "") == "warn"
    assert merge_string("warn", "error") == "error"


def test_merge_flag_false_override_cannot_clear_true_base() -> None:
    assert merge_flag(True, False) is True
    assert merge_flag(False, True) is True
    assert merge_flag(False, False) is False


def test_merge_threshold_only_positive_override_wins() -> None:
    assert merge_threshold(75, 0) == 75
    assert merge_threshold(75, 50) == 50


def test_merge_rules_nested_sections() -> None:
    base = RulesConfig(
        test_files=TestFilesConfig(lint=True, exempt_imports=["testing"]),
        test_coverage=TestCoverageConfig(
            enabled=True, threshold=70, package_thresholds={"cmd": 40}
        ),
    )
    override = RulesConfig(
        test_files=TestFilesConfig(lint=False, exempt_imports=["github.com/x/y"]),
        test_coverage=TestCoverageConfig(package_thresholds={"cmd": 20, "pkg": 60}),
    )

    merged = merge_rules(base, override)

    assert merged.test_files.lint is True
    assert merged.test_files.exempt_imports == ["testing", "github.com/x/y"]
    assert merged.test_coverage.enabled is True
    assert merged.test_coverage.threshold == 70
    assert merged.test_coverage.package_thresholds == {"cmd": 20, "pkg": 60}


def test_resolve_flat_config_uses_defaults() -> None:
    document = parse_config_document({"module": "example.com/app"})

    config = resolve_config(document)

    assert config.module == "example.com/app"
    assert config.preset_name == ""
    assert config.scan_paths == ["cmd", "pkg", "internal"]
    assert config.ignore_paths == ["vendor", "testdata"]
    assert config.entry_package == "main"
    assert config.shared_imports_mode == "warn"


def test_resolve_preset_with_overrides() -> None:
    document = parse_config_document(
        {
            "module": "example.com/app",
            "preset": {"name": "ddd"},
            "overrides": {
                "rules": {
                    "directories_import": {"internal/app": ["internal/domain", "pkg"]},
                    "shared_external_imports": {
                        "mode": "error",
                        "exclusions": ["github.com/google/uuid"],
                    },
                    "test_coverage": {"threshold": 50},
                }
            },
        }
    )

    config = resolve_config(document)
    preset_rules = get_preset("ddd").rule_set.rules

    assert config.preset_name == "ddd"
    assert config.rules.directories_import["internal/app"] == [
        "internal/domain",
        "pkg",
    ]
    assert config.rules.directories_import["internal/domain"] == []
    assert config.shared_imports_mode == "error"
    assert config.rules.shared_external_imports.exclusions == [
        *preset_rules.shared_external_imports.exclusions,
        "github.com/google/uuid",
    ]
    assert config.rules.test_coverage.threshold == 50
    assert config.rules.test_coverage.package_thresholds == (
        preset_rules.test_coverage.package_thresholds
    )


def test_resolve_preset_false_override_keeps_true_flag() -> None:
    document = parse_config_document(
        {
            "module": "example.com/app",
            "preset": {"name": "simple"},
            "overrides": {"rules": {"detect_unused": False}},
        }
    )

    config = resolve_config(document)

    assert config.rules.detect_unused is True


def test_resolve_preset_embedded_rules_replace_builtin_base() -> None:
    document = parse_config_document(
        {
            "module": "example.com/app",
            "preset": {
                "name": "custom",
                "rules": {"directories_import": {"cmd": ["lib"], "lib": []}},
            },
        }
    )

    config = resolve_config(document)

    assert config.preset_name == "custom"
    assert config.rules.directories_import == {"cmd": ["lib"], "lib": []}
    assert config.rules.detect_unused is False


def test_resolve_unknown_preset_rejected() -> None:
    document = parse_config_document(
        {"module": "example.com/app", "preset": {"name": "onion"}}
    )

    with pytest.raises(ConfigError, match="Preset 'onion' not found"):
        resolve_config(document)


def test_resolve_module_falls_back_to_go_mod(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("module example.com/fromgomod\n", encoding="utf-8")
    document = parse_config_document({})

    config = resolve_config(document, root=tmp_path)

    assert config.module == "example.com/fromgomod"


def test_resolve_explicit_module_argument_wins(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("module example.com/fromgomod\n", encoding="utf-8")
    document = parse_config_document({"module": "example.com/fromconfig"})

    config = resolve_config(document, root=tmp_path, module="example.com/explicit")

    assert config.module == "example.com/explicit"


def test_resolve_without_any_module_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_config(parse_config_document({}))
