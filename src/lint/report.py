"""Text and JSON rendering of lint results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from validator.violations import ViolationKind

if TYPE_CHECKING:
    from pathlib import Path

    from lint.run import LintResult
    from rules.config import ErrorPromptConfig
    from validator.violations import Violation

REPORT_VERSION = 1


def _format_violation(violation: Violation) -> list[str]:
    lines = [f"[{violation.kind.title}] {violation.file}", f"  {violation.message}"]
    if violation.files and violation.files != [violation.file]:
        lines.append(f"  Files: {', '.join(violation.files)}")
    if violation.rule:
        lines.append(f"  Rule: {violation.rule}")
    if violation.fix:
        lines.append(f"  Fix: {violation.fix}")
    return lines


def _guidance(prompt: ErrorPromptConfig, kinds: set[ViolationKind]) -> list[str]:
    """Narrative guidance, each block at most once per report."""
    if not prompt.enabled:
        return []

    lines: list[str] = []
    if prompt.architectural_goals:
        lines += ["Architectural goals:", f"  {prompt.architectural_goals.strip()}"]
    if prompt.principles:
        lines.append("Principles:")
        lines += [f"  - {principle}" for principle in prompt.principles]
    if prompt.refactoring_guidance and ViolationKind.FORBIDDEN_IMPORT in kinds:
        lines += ["Refactoring guidance:", f"  {prompt.refactoring_guidance.strip()}"]
    if prompt.coverage_guidance and ViolationKind.LOW_COVERAGE in kinds:
        lines += ["Coverage guidance:", f"  {prompt.coverage_guidance.strip()}"]
    if prompt.blackbox_testing_guidance and ViolationKind.WHITEBOX_TEST in kinds:
        lines += [
            "Blackbox testing guidance:",
            f"  {prompt.blackbox_testing_guidance.strip()}",
        ]
    return lines


def format_text(result: LintResult) -> str:
    """Render a lint result for the terminal."""
    if not result.violations:
        return "No architectural violations found.\n"

    lines: list[str] = []
    for violation in result.violations:
        lines += _format_violation(violation)
        lines.append("")

    guidance = _guidance(
        result.config.error_prompt, {v.kind for v in result.violations}
    )
    if guidance:
        lines += [*guidance, ""]

    count = len(result.violations)
    lines.append(f"{count} violation{'s' if count != 1 else ''} found.")
    if not result.failed:
        lines.append("Shared external imports are reported as warnings; build passes.")
    return "\n".join(lines) + "\n"


def report_payload(result: LintResult, *, include_graph: bool = False) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "version": REPORT_VERSION,
        "module": result.config.module,
        "preset": result.config.preset_name,
        "file_count": len(result.graph.nodes),
        "violation_count": len(result.violations),
        "violations": [v.model_dump(mode="json") for v in result.violations],
        "failed": result.failed,
    }
    if include_graph:
        payload["graph"] = result.graph.to_dict()
    return payload


def render_json(result: LintResult, *, include_graph: bool = False) -> bytes:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(report_payload(result, include_graph=include_graph), option=opts)


def write_report(path: Path, result: LintResult, *, include_graph: bool = False) -> None:
    """Write the JSON report, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_json(result, include_graph=include_graph))


__all__ = ["format_text", "render_json", "report_payload", "write_report"]
