"""End-to-end lint runs and report rendering."""

from lint.report import format_text, render_json, write_report
from lint.run import LintResult, run_lint

__all__ = ["LintResult", "format_text", "render_json", "run_lint", "write_report"]
