"""Test-file policies: blackbox packages and test file location."""

from __future__ import annotations

from typing import TYPE_CHECKING

from validator.violations import Violation, ViolationKind

if TYPE_CHECKING:
    from graph.model import Dependency, FileNode, Graph
    from rules.config import ResolvedConfig

BLACKBOX_SUFFIX = "_test"
TESTS_DIRECTORY = "tests"


def is_blackbox_test(node: FileNode) -> bool:
    """A blackbox test is a test file declared as ``package <name>_test``."""
    return node.is_test and node.package.endswith(BLACKBOX_SUFFIX)


def is_exempt_test_import(
    node: FileNode, dep: Dependency, exempt_imports: set[str]
) -> bool:
    """Check whether a test file's import is excused from layering rules.

    Listed exempt imports are always excused. A blackbox test may also
    import the package of its own directory, which is how it reaches the
    code under test.
    """
    if dep.import_path in exempt_imports or (
        dep.is_local and dep.local_path in exempt_imports
    ):
        return True
    return is_blackbox_test(node) and dep.is_local and dep.local_path == node.directory


def validate_blackbox_tests(graph: Graph) -> list[Violation]:
    """Report test files declared in the production package (whitebox tests)."""
    violations: list[Violation] = []

    for node in graph.test_nodes():
        if is_blackbox_test(node):
            continue

        expected = node.package + BLACKBOX_SUFFIX
        violations.append(
            Violation(
                kind=ViolationKind.WHITEBOX_TEST,
                file=node.rel_path,
                message=(
                    f"Test file uses whitebox testing "
                    f"(package {node.package} instead of {expected})"
                ),
                rule=(
                    "Blackbox testing is enforced so tests exercise the public "
                    "API rather than implementation details"
                ),
                fix=(
                    f"Change the package clause from 'package {node.package}' "
                    f"to 'package {expected}'"
                ),
            )
        )

    return violations


def _in_tests_directory(rel_path: str) -> bool:
    return rel_path.startswith(TESTS_DIRECTORY + "/") or (
        f"/{TESTS_DIRECTORY}/" in rel_path
    )


def validate_test_file_locations(graph: Graph, location: str) -> list[Violation]:
    """Check test files against the ``colocated`` or ``separate`` policy."""
    violations: list[Violation] = []

    for node in graph.test_nodes():
        in_tests_dir = _in_tests_directory(node.rel_path)

        if location == "colocated" and in_tests_dir:
            violations.append(
                Violation(
                    kind=ViolationKind.TEST_FILE_LOCATION,
                    file=node.rel_path,
                    message="Test file is in a separate tests/ directory",
                    rule="Test files must sit next to the code they test (location: colocated)",
                    fix="Move the test file into the directory of the code it tests",
                )
            )
        elif location == "separate" and not in_tests_dir:
            violations.append(
                Violation(
                    kind=ViolationKind.TEST_FILE_LOCATION,
                    file=node.rel_path,
                    message="Test file is colocated with code instead of under tests/",
                    rule="Test files must live in a tests/ directory (location: separate)",
                    fix="Move the test file to tests/, mirroring the source layout",
                )
            )

    return violations


def validate_test_files(graph: Graph, config: ResolvedConfig) -> list[Violation]:
    """Run the test-file policies enabled in the configuration."""
    policy = config.rules.test_files
    if not policy.lint:
        return []

    violations: list[Violation] = []
    if policy.location in ("colocated", "separate"):
        violations.extend(validate_test_file_locations(graph, policy.location))
    if policy.require_blackbox:
        violations.extend(validate_blackbox_tests(graph))
    return violations


__all__ = [
    "is_blackbox_test",
    "is_exempt_test_import",
    "validate_blackbox_tests",
    "validate_test_file_locations",
    "validate_test_files",
]
