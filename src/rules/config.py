from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILENAME = "layerlint.toml"
GO_MOD_FILENAME = "go.mod"

DEFAULT_SCAN_PATHS = ["cmd", "pkg", "internal"]
DEFAULT_IGNORE_PATHS = ["vendor", "testdata"]

SharedImportsMode = Literal["", "warn", "error"]
TestFileLocation = Literal["", "colocated", "separate", "any"]


class ConfigError(Exception):
    """Raised when configuration is missing, unparsable, or incomplete."""


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class StructureConfig(_Section):
    """Directories the project layout must contain."""

    required_directories: dict[str, str] = Field(
        default_factory=dict,
        description="Directory path -> human readable purpose",
    )
    allow_other_directories: bool = Field(
        default=False,
        description="Tolerate top-level directories outside required_directories",
    )


class SharedExternalImportsConfig(_Section):
    """Policy for external imports consumed by more than one layer."""

    detect: bool = False
    mode: SharedImportsMode = Field(
        default="",
        description="'warn' records violations without failing; 'error' fails",
    )
    exclusions: list[str] = Field(default_factory=list)
    exclusion_patterns: list[str] = Field(default_factory=list)


class TestFilesConfig(_Section):
    """Policy for *_test files."""

    __test__ = False

    lint: bool = False
    exempt_imports: list[str] = Field(default_factory=list)
    location: TestFileLocation = ""
    require_blackbox: bool = False


class TestCoverageConfig(_Section):
    """Coverage thresholds, resolved hierarchically per package."""

    __test__ = False

    enabled: bool = False
    threshold: float = Field(default=0.0, ge=0.0, le=100.0)
    package_thresholds: dict[str, float] = Field(default_factory=dict)

    @field_validator("package_thresholds")
    @classmethod
    def validate_package_thresholds(cls, v: dict[str, float]) -> dict[str, float]:
        for package, threshold in v.items():
            if not 0.0 <= threshold <= 100.0:
                msg = (
                    f"Threshold for '{package}' must be between 0 and 100, "
                    f"got {threshold}"
                )
                raise ValueError(msg)
        return v


class RulesConfig(_Section):
    """Architectural rules evaluated against the dependency graph."""

    directories_import: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Layer prefix -> closed set of layers it may import",
    )
    detect_unused: bool = False
    entry_package: str = Field(
        default="",
        description="Package name of program entry files (default: main)",
    )
    strict_test_naming: bool = False
    shared_external_imports: SharedExternalImportsConfig = Field(
        default_factory=SharedExternalImportsConfig
    )
    test_files: TestFilesConfig = Field(default_factory=TestFilesConfig)
    test_coverage: TestCoverageConfig = Field(default_factory=TestCoverageConfig)


class ErrorPromptConfig(_Section):
    """Narrative guidance printed alongside violations."""

    enabled: bool = False
    architectural_goals: str = ""
    principles: list[str] = Field(default_factory=list)
    refactoring_guidance: str = ""
    coverage_guidance: str = ""
    blackbox_testing_guidance: str = ""


class RuleSet(_Section):
    """One complete set of structure, rules and guidance."""

    structure: StructureConfig = Field(default_factory=StructureConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    error_prompt: ErrorPromptConfig = Field(default_factory=ErrorPromptConfig)


class PresetSection(RuleSet):
    """The ``[preset]`` table: a preset name plus an optional embedded rule set."""

    name: str

    def has_embedded_rules(self) -> bool:
        return bool(self.model_fields_set & {"structure", "rules", "error_prompt"})


class _DocumentBase(_Section):
    module: str = ""
    scan_paths: list[str] = Field(default_factory=list)
    ignore_paths: list[str] = Field(default_factory=list)


class FlatConfig(_DocumentBase, RuleSet):
    """Legacy single-level configuration document."""


class PresetConfig(_DocumentBase):
    """Configuration document built from a preset plus overrides."""

    preset: PresetSection
    overrides: RuleSet = Field(default_factory=RuleSet)


ConfigDocument = FlatConfig | PresetConfig


class ResolvedConfig(BaseModel):
    """Canonical configuration every downstream component consumes."""

    model_config = ConfigDict(frozen=True)

    module: str
    scan_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_SCAN_PATHS))
    ignore_paths: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATHS)
    )
    preset_name: str = ""
    structure: StructureConfig = Field(default_factory=StructureConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    error_prompt: ErrorPromptConfig = Field(default_factory=ErrorPromptConfig)

    @property
    def entry_package(self) -> str:
        return self.rules.entry_package or "main"

    @property
    def shared_imports_mode(self) -> str:
        return self.rules.shared_external_imports.mode or "warn"

    @property
    def lint_test_files(self) -> bool:
        return self.rules.test_files.lint


def parse_config_document(data: dict[str, Any]) -> ConfigDocument:
    """Validate raw config data as either the flat or the preset shape."""
    if "preset" in data:
        return PresetConfig.model_validate(data)
    if "overrides" in data:
        msg = "'overrides' requires a 'preset' section"
        raise ConfigError(msg)
    return FlatConfig.model_validate(data)


def detect_module(root: Path) -> str:
    """Read the module identity from the ``module`` line of go.mod."""
    go_mod = root / GO_MOD_FILENAME
    try:
        content = go_mod.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot determine module: failed to read {go_mod}: {exc}"
        raise ConfigError(msg) from exc

    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("module "):
            module = stripped[len("module ") :].strip().strip('"')
            if module:
                return module

    msg = f"Cannot determine module: no module directive in {go_mod}"
    raise ConfigError(msg)


def load_config(root: Path) -> ConfigDocument:
    """Load and validate layerlint.toml from the project root."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        msg = f"Configuration file not found: {config_path}"
        raise ConfigError(msg)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return parse_config_document(data)
    except ValidationError as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
