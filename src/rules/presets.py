"""Built-in architecture presets."""

from __future__ import annotations

from dataclasses import dataclass

from rules.config import (
    ConfigError,
    ErrorPromptConfig,
    RuleSet,
    RulesConfig,
    SharedExternalImportsConfig,
    StructureConfig,
    TestCoverageConfig,
    TestFilesConfig,
)

_COMMON_EXCLUSIONS = ["fmt", "strings", "errors", "time", "context"]
_COMMON_EXCLUSION_PATTERNS = ["encoding/*"]
_COMMON_TEST_EXEMPT_IMPORTS = [
    "testing",
    "github.com/stretchr/testify/assert",
    "github.com/stretchr/testify/require",
    "github.com/stretchr/testify/mock",
]

_BLACKBOX_GUIDANCE = """
Blackbox tests (declared as 'package foo_test' rather than 'package foo')
exercise a package only through its exported surface, so they keep passing
while internals are refactored.

- Verify behaviour through exported functions, types and methods.
- If the public API is not enough to test a component, revisit its design.
- To convert: rename the package clause to 'package foo_test', import the
  package under test by its module path, and drop references to unexported names.
"""


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    rule_set: RuleSet


def _shared_imports() -> SharedExternalImportsConfig:
    return SharedExternalImportsConfig(
        detect=True,
        mode="warn",
        exclusions=list(_COMMON_EXCLUSIONS),
        exclusion_patterns=list(_COMMON_EXCLUSION_PATTERNS),
    )


def _test_files() -> TestFilesConfig:
    return TestFilesConfig(
        lint=True,
        location="colocated",
        require_blackbox=True,
        exempt_imports=list(_COMMON_TEST_EXEMPT_IMPORTS),
    )


def _ddd() -> Preset:
    return Preset(
        name="ddd",
        description="Domain-Driven Design with strict layering (domain <- app <- infra)",
        rule_set=RuleSet(
            structure=StructureConfig(
                required_directories={
                    "internal/domain": "Core business logic, entities, value objects",
                    "internal/app": "Application services and use cases",
                    "internal/infra": "Infrastructure implementations (DB, APIs, messaging)",
                    "cmd": "Application entry points",
                },
                allow_other_directories=True,
            ),
            rules=RulesConfig(
                directories_import={
                    "internal/domain": [],
                    "internal/app": ["internal/domain"],
                    "internal/infra": ["internal/domain"],
                    "cmd": ["internal/app", "internal/infra"],
                },
                detect_unused=True,
                shared_external_imports=_shared_imports(),
                test_files=_test_files(),
                test_coverage=TestCoverageConfig(
                    enabled=True,
                    threshold=75,
                    package_thresholds={
                        "cmd": 40,
                        "internal/domain": 90,
                        "internal/app": 80,
                        "internal/infra": 60,
                    },
                ),
            ),
            error_prompt=ErrorPromptConfig(
                enabled=True,
                architectural_goals=(
                    "Keep business rules pure and isolated in the domain layer, "
                    "so the model evolves independently of storage, transport "
                    "and framework choices."
                ),
                principles=[
                    "The domain layer has no project dependencies",
                    "The application layer orchestrates domain objects into use cases",
                    "Infrastructure implements technical details behind domain interfaces",
                    "Dependencies point inward: cmd -> infra/app -> domain",
                    "Layers must not form circular dependencies",
                ],
                refactoring_guidance=(
                    "Move business rules into internal/domain, declare the "
                    "interfaces the domain needs there, implement them in "
                    "internal/infra, and inject the implementations from cmd."
                ),
                coverage_guidance=(
                    "Domain code is side-effect free and carries the highest bar "
                    "(90%). Use cases follow at 80%, adapters at 60%, and entry "
                    "points only need their wiring covered (40%)."
                ),
                blackbox_testing_guidance=_BLACKBOX_GUIDANCE,
            ),
        ),
    )


def _simple() -> Preset:
    return Preset(
        name="simple",
        description="Basic Go project structure (cmd -> pkg -> internal)",
        rule_set=RuleSet(
            structure=StructureConfig(
                required_directories={
                    "cmd": "Application entry points",
                    "pkg": "Public libraries and APIs",
                    "internal": "Private application code",
                },
                allow_other_directories=True,
            ),
            rules=RulesConfig(
                directories_import={
                    "cmd": ["pkg"],
                    "pkg": ["internal"],
                    "internal": [],
                },
                detect_unused=True,
                shared_external_imports=_shared_imports(),
                test_files=_test_files(),
                test_coverage=TestCoverageConfig(
                    enabled=True,
                    threshold=60,
                    package_thresholds={"cmd": 30, "pkg": 60, "internal": 70},
                ),
            ),
            error_prompt=ErrorPromptConfig(
                enabled=True,
                architectural_goals=(
                    "Separate public APIs (pkg) from private implementation "
                    "(internal) and keep entry points (cmd) thin."
                ),
                principles=[
                    "cmd only parses flags and wires the application together",
                    "pkg exposes reusable, public libraries",
                    "internal packages do not depend on each other",
                    "Dependencies flow: cmd -> pkg -> internal",
                ],
                refactoring_guidance=(
                    "When internal packages import each other, declare an "
                    "interface in the consumer and bridge the two with an "
                    "adapter in pkg, or merge packages that are too granular."
                ),
                coverage_guidance=(
                    "internal carries the core logic (70%), pkg is the public "
                    "contract (60%), cmd needs basic workflow coverage (30%)."
                ),
                blackbox_testing_guidance=_BLACKBOX_GUIDANCE,
            ),
        ),
    )


def _hexagonal() -> Preset:
    return Preset(
        name="hexagonal",
        description="Ports & Adapters architecture (core <- ports <- adapters)",
        rule_set=RuleSet(
            structure=StructureConfig(
                required_directories={
                    "internal/core": "Business logic and domain types",
                    "internal/ports": "Inbound and outbound interfaces",
                    "internal/adapters": "Technology-specific port implementations",
                    "cmd": "Application entry points and wiring",
                },
                allow_other_directories=True,
            ),
            rules=RulesConfig(
                directories_import={
                    "internal/core": [],
                    "internal/ports": ["internal/core"],
                    "internal/adapters": ["internal/ports", "internal/core"],
                    "cmd": ["internal/ports", "internal/adapters"],
                },
                detect_unused=True,
                shared_external_imports=_shared_imports(),
                test_files=_test_files(),
                test_coverage=TestCoverageConfig(
                    enabled=True,
                    threshold=75,
                    package_thresholds={
                        "cmd": 40,
                        "internal/core": 90,
                        "internal/ports": 85,
                        "internal/adapters": 60,
                    },
                ),
            ),
            error_prompt=ErrorPromptConfig(
                enabled=True,
                architectural_goals=(
                    "Isolate the core from I/O and frameworks; every external "
                    "interaction goes through a port implemented by an adapter."
                ),
                principles=[
                    "Core has no dependencies on ports or adapters",
                    "Ports define interfaces in terms of core types",
                    "Adapters implement ports with concrete technologies",
                    "Dependencies point inward: cmd -> adapters -> ports -> core",
                ],
                refactoring_guidance=(
                    "Extract domain logic into internal/core, describe external "
                    "needs as interfaces in internal/ports, implement them in "
                    "internal/adapters, and wire everything in cmd."
                ),
                coverage_guidance=(
                    "Core logic should be exhaustively tested (90%), port "
                    "contracts closely (85%), adapters moderately (60%), and the "
                    "wiring in cmd at a basic level (40%)."
                ),
                blackbox_testing_guidance=_BLACKBOX_GUIDANCE,
            ),
        ),
    )


def available_presets() -> list[Preset]:
    """Return all built-in presets in display order."""
    return [_ddd(), _simple(), _hexagonal()]


def get_preset(name: str) -> Preset:
    """Return the built-in preset called ``name``."""
    for preset in available_presets():
        if preset.name == name:
            return preset
    known = ", ".join(preset.name for preset in available_presets())
    msg = f"Preset '{name}' not found (available: {known})"
    raise ConfigError(msg)


__all__ = ["Preset", "available_presets", "get_preset"]
