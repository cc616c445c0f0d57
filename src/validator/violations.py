"""Violation records produced by the rule validators."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collections.abc import Iterable


class ViolationKind(str, Enum):
    """Every kind of architectural rule violation."""

    FORBIDDEN_IMPORT = "forbidden_import"
    UNUSED_PACKAGE = "unused_package"
    SHARED_EXTERNAL_IMPORT = "shared_external_import"
    WHITEBOX_TEST = "whitebox_test"
    TEST_FILE_LOCATION = "test_file_location"
    TEST_NAMING_ORPHAN = "test_naming_orphan"
    LOW_COVERAGE = "low_coverage"
    MISSING_DIRECTORY = "missing_directory"
    EMPTY_DIRECTORY = "empty_directory"
    UNUSED_DIRECTORY = "unused_directory"
    UNEXPECTED_DIRECTORY = "unexpected_directory"

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    ViolationKind.FORBIDDEN_IMPORT: "Forbidden Import",
    ViolationKind.UNUSED_PACKAGE: "Unused Package",
    ViolationKind.SHARED_EXTERNAL_IMPORT: "Shared External Import",
    ViolationKind.WHITEBOX_TEST: "Whitebox Test",
    ViolationKind.TEST_FILE_LOCATION: "Test File Wrong Location",
    ViolationKind.TEST_NAMING_ORPHAN: "Orphaned Test File",
    ViolationKind.LOW_COVERAGE: "Insufficient Test Coverage",
    ViolationKind.MISSING_DIRECTORY: "Missing Required Directory",
    ViolationKind.EMPTY_DIRECTORY: "Empty Required Directory",
    ViolationKind.UNUSED_DIRECTORY: "Unused Required Directory",
    ViolationKind.UNEXPECTED_DIRECTORY: "Unexpected Directory",
}


class Violation(BaseModel):
    """A single rule violation, self-describing enough to render."""

    kind: ViolationKind
    file: str = Field(description="File, package or directory the violation is about")
    message: str
    rule: str = ""
    fix: str = ""
    import_path: str | None = None
    source_layer: str | None = None
    target_layer: str | None = None
    layer_count: int | None = None
    files: list[str] = Field(default_factory=list)


def violation_sort_key(violation: Violation) -> tuple[str, str, str, str]:
    return (
        violation.file,
        violation.kind.value,
        violation.import_path or "",
        violation.message,
    )


def sort_violations(violations: Iterable[Violation]) -> list[Violation]:
    """Order violations by file, kind, import path, then message."""
    return sorted(violations, key=violation_sort_key)


__all__ = ["Violation", "ViolationKind", "sort_violations", "violation_sort_key"]
