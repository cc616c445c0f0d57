"""Resolution of configuration documents into one canonical rule set.

A preset document is merged field by field with its overrides:

* maps: a copy of the base with override entries added or replaced
* cumulative string lists: ordered union, base items first
* scalar strings: the override wins only when it is non-empty
* booleans: logical OR, so a false override never clears a true base
* numeric thresholds: the override wins only when it is greater than zero
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from rules.config import (
    DEFAULT_IGNORE_PATHS,
    DEFAULT_SCAN_PATHS,
    ConfigError,
    ErrorPromptConfig,
    FlatConfig,
    ResolvedConfig,
    RuleSet,
    RulesConfig,
    SharedExternalImportsConfig,
    StructureConfig,
    TestCoverageConfig,
    TestFilesConfig,
    detect_module,
)
from rules.presets import get_preset

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from rules.config import ConfigDocument, PresetConfig

_V = TypeVar("_V")


def merge_maps(base: Mapping[str, _V], override: Mapping[str, _V]) -> dict[str, _V]:
    merged = dict(base)
    merged.update(override)
    return merged


def merge_unique(base: Iterable[str], override: Iterable[str]) -> list[str]:
    merged: list[str] = []
    seen: set[str] = set()
    for item in (*base, *override):
        if item not in seen:
            seen.add(item)
            merged.append(item)
    return merged


def merge_string(base: str, override: str) -> str:
    return override if override else base


def merge_flag(base: bool, override: bool) -> bool:
    # A false override cannot clear a true base.
    return base or override


def merge_threshold(base: float, override: float) -> float:
    return override if override > 0 else base


def merge_structure(base: StructureConfig, override: StructureConfig) -> StructureConfig:
    return StructureConfig(
        required_directories=merge_maps(
            base.required_directories, override.required_directories
        ),
        allow_other_directories=merge_flag(
            base.allow_other_directories, override.allow_other_directories
        ),
    )


def merge_rules(base: RulesConfig, override: RulesConfig) -> RulesConfig:
    base_shared = base.shared_external_imports
    over_shared = override.shared_external_imports
    base_tests = base.test_files
    over_tests = override.test_files
    base_cov = base.test_coverage
    over_cov = override.test_coverage

    return RulesConfig(
        directories_import={
            layer: list(allowed)
            for layer, allowed in merge_maps(
                base.directories_import, override.directories_import
            ).items()
        },
        detect_unused=merge_flag(base.detect_unused, override.detect_unused),
        entry_package=merge_string(base.entry_package, override.entry_package),
        strict_test_naming=merge_flag(
            base.strict_test_naming, override.strict_test_naming
        ),
        shared_external_imports=SharedExternalImportsConfig(
            detect=merge_flag(base_shared.detect, over_shared.detect),
            mode=merge_string(base_shared.mode, over_shared.mode),
            exclusions=merge_unique(base_shared.exclusions, over_shared.exclusions),
            exclusion_patterns=merge_unique(
                base_shared.exclusion_patterns, over_shared.exclusion_patterns
            ),
        ),
        test_files=TestFilesConfig(
            lint=merge_flag(base_tests.lint, over_tests.lint),
            exempt_imports=merge_unique(
                base_tests.exempt_imports, over_tests.exempt_imports
            ),
            location=merge_string(base_tests.location, over_tests.location),
            require_blackbox=merge_flag(
                base_tests.require_blackbox, over_tests.require_blackbox
            ),
        ),
        test_coverage=TestCoverageConfig(
            enabled=merge_flag(base_cov.enabled, over_cov.enabled),
            threshold=merge_threshold(base_cov.threshold, over_cov.threshold),
            package_thresholds=merge_maps(
                base_cov.package_thresholds, over_cov.package_thresholds
            ),
        ),
    )


def merge_error_prompt(
    base: ErrorPromptConfig, override: ErrorPromptConfig
) -> ErrorPromptConfig:
    return ErrorPromptConfig(
        enabled=merge_flag(base.enabled, override.enabled),
        architectural_goals=merge_string(
            base.architectural_goals, override.architectural_goals
        ),
        principles=merge_unique(base.principles, override.principles),
        refactoring_guidance=merge_string(
            base.refactoring_guidance, override.refactoring_guidance
        ),
        coverage_guidance=merge_string(
            base.coverage_guidance, override.coverage_guidance
        ),
        blackbox_testing_guidance=merge_string(
            base.blackbox_testing_guidance, override.blackbox_testing_guidance
        ),
    )


def merge_rule_sets(base: RuleSet, override: RuleSet) -> RuleSet:
    """Merge an override rule set onto a base rule set."""
    return RuleSet(
        structure=merge_structure(base.structure, override.structure),
        rules=merge_rules(base.rules, override.rules),
        error_prompt=merge_error_prompt(base.error_prompt, override.error_prompt),
    )


def _preset_base(document: PresetConfig) -> RuleSet:
    section = document.preset
    if section.has_embedded_rules():
        return RuleSet(
            structure=section.structure,
            rules=section.rules,
            error_prompt=section.error_prompt,
        )
    return get_preset(section.name).rule_set


def resolve_config(
    document: ConfigDocument,
    *,
    root: Path | None = None,
    module: str | None = None,
) -> ResolvedConfig:
    """Resolve a loaded config document into a ResolvedConfig.

    Module identity is taken from, in order: the ``module`` argument, the
    document's ``module`` key, and the go.mod file under ``root``.

    Raises:
        ConfigError: If the preset is unknown or no module identity can be found.
    """
    resolved_module = module or document.module
    if not resolved_module:
        if root is None:
            msg = "Module identity is not configured and no project root was given"
            raise ConfigError(msg)
        resolved_module = detect_module(root)

    if isinstance(document, FlatConfig):
        preset_name = ""
        rule_set = RuleSet(
            structure=document.structure,
            rules=document.rules,
            error_prompt=document.error_prompt,
        )
    else:
        preset_name = document.preset.name
        rule_set = merge_rule_sets(_preset_base(document), document.overrides)

    return ResolvedConfig(
        module=resolved_module,
        scan_paths=document.scan_paths or list(DEFAULT_SCAN_PATHS),
        ignore_paths=document.ignore_paths or list(DEFAULT_IGNORE_PATHS),
        preset_name=preset_name,
        structure=rule_set.structure,
        rules=rule_set.rules,
        error_prompt=rule_set.error_prompt,
    )


__all__ = [
    "merge_error_prompt",
    "merge_flag",
    "merge_maps",
    "merge_rule_sets",
    "merge_rules",
    "merge_string",
    "merge_structure",
    "merge_threshold",
    "merge_unique",
    "resolve_config",
]
