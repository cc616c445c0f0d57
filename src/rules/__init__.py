"""Configuration, presets and layer rules for layerlint."""

from rules.config import (
    ConfigError,
    FlatConfig,
    PresetConfig,
    ResolvedConfig,
    load_config,
)
from rules.layers import build_allowed_deps, classify_layer, is_violation
from rules.merge import resolve_config
from rules.presets import available_presets, get_preset

__all__ = [
    "ConfigError",
    "FlatConfig",
    "PresetConfig",
    "ResolvedConfig",
    "available_presets",
    "build_allowed_deps",
    "classify_layer",
    "get_preset",
    "is_violation",
    "load_config",
    "resolve_config",
]
