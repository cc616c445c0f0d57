from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import ConfigError, FlatConfig, PresetConfig, detect_module, load_config


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "layerlint.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_file_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Configuration file not found"):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "[rules\n")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_nested_rules_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[rules.test_files]
lint = true
bogus = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_shared_imports_mode_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[rules.shared_external_imports]
mode = "loud"
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_out_of_range_package_threshold_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[rules.test_coverage.package_thresholds]
cmd = 140
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_overrides_without_preset_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[overrides.rules]
detect_unused = true
""".strip(),
    )

    with pytest.raises(ConfigError, match="requires a 'preset'"):
        load_config(tmp_path)


def test_flat_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
module = "example.com/app"

[rules]
detect_unused = true

[rules.directories_import]
cmd = ["pkg"]
pkg = []
""".strip(),
    )

    config = load_config(tmp_path)

    assert isinstance(config, FlatConfig)
    assert config.module == "example.com/app"
    assert config.rules.detect_unused is True
    assert config.rules.directories_import == {"cmd": ["pkg"], "pkg": []}


def test_preset_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[preset]
name = "ddd"

[overrides.rules.shared_external_imports]
exclusions = ["github.com/google/uuid"]
""".strip(),
    )

    config = load_config(tmp_path)

    assert isinstance(config, PresetConfig)
    assert config.preset.name == "ddd"
    assert config.preset.has_embedded_rules() is False
    assert config.overrides.rules.shared_external_imports.exclusions == [
        "github.com/google/uuid"
    ]


def test_empty_config_accepted(tmp_path: Path) -> None:
    _write_config(tmp_path, "")

    config = load_config(tmp_path)

    assert isinstance(config, FlatConfig)
    assert config.module == ""
    assert config.rules.directories_import == {}


def test_detect_module_reads_go_mod(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text(
        "module example.com/app\n\ngo 1.22\n", encoding="utf-8"
    )

    assert detect_module(tmp_path) == "example.com/app"


def test_detect_module_without_go_mod_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot determine module"):
        detect_module(tmp_path)


def test_detect_module_without_module_directive_rejected(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("go 1.22\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="no module directive"):
        detect_module(tmp_path)
