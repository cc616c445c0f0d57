"""Command-line interface for layerlint."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lint.report import format_text, render_json, write_report
from lint.run import run_lint
from pkgcoverage.report import CoverageError, load_coverage_report
from rules.config import CONFIG_FILENAME, ConfigError
from rules.presets import available_presets, get_preset
from scan.files import ScanError
from verify.verify import verify_determinism

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2

INIT_TEMPLATE = """\
# layerlint configuration generated from the '{name}' preset.
# Entries under [overrides] are merged onto the preset.
{module_line}
[preset]
name = "{name}"

[overrides.rules]
# detect_unused = true

[overrides.rules.shared_external_imports]
# exclusions = ["github.com/google/uuid"]
"""


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="layerlint")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Check the project against its architecture rules"
    )
    _add_common_paths(check_parser)
    check_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    check_parser.add_argument(
        "--output",
        default=None,
        help="Write the JSON report to this file",
    )
    check_parser.add_argument(
        "--coverage-file",
        default=None,
        help="JSON coverage report to check against coverage thresholds",
    )
    check_parser.add_argument(
        "--detailed",
        action="store_true",
        help="Include the dependency graph with used symbols in JSON output",
    )
    check_parser.add_argument(
        "--exit-zero",
        action="store_true",
        help="Exit with code 0 even when the build fails",
    )

    subparsers.add_parser("presets", help="List built-in presets")

    init_parser = subparsers.add_parser(
        "init", help=f"Write a {CONFIG_FILENAME} based on a preset"
    )
    _add_common_paths(init_parser)
    init_parser.add_argument(
        "--preset",
        required=True,
        help="Built-in preset name",
    )
    init_parser.add_argument(
        "--module",
        default=None,
        help="Module path (default: read from go.mod)",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration file",
    )
    init_parser.add_argument(
        "--create-dirs",
        action="store_true",
        help="Also create the preset's required directories",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify a saved JSON report is reproduced exactly"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--report",
        required=True,
        help="Previously written JSON report",
    )
    verify_parser.add_argument(
        "--coverage-file",
        default=None,
        help="Coverage report used when the saved report was written",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _resolve_file(path: str | None) -> Path | None:
    if path is None:
        return None
    return Path(path).expanduser().resolve()


def _handle_check(args: argparse.Namespace, root: Path) -> int:
    coverage_path = _resolve_file(args.coverage_file)
    coverage = load_coverage_report(coverage_path) if coverage_path else None

    result = run_lint(root, coverage=coverage, detailed=args.detailed)

    output_path = _resolve_file(args.output)
    if output_path is not None:
        write_report(output_path, result, include_graph=args.detailed)

    if args.format == "json":
        sys.stdout.write(render_json(result, include_graph=args.detailed).decode())
        sys.stdout.write("\n")
    else:
        sys.stdout.write(format_text(result))

    if result.failed and not args.exit_zero:
        return EXIT_VIOLATIONS
    return EXIT_OK


def _handle_presets() -> int:
    for preset in available_presets():
        sys.stdout.write(f"{preset.name:<12}{preset.description}\n")
    return EXIT_OK


def _handle_init(args: argparse.Namespace, root: Path) -> int:
    preset = get_preset(args.preset)
    config_path = root / CONFIG_FILENAME
    if config_path.exists() and not args.force:
        sys.stderr.write(f"error: {config_path} already exists (use --force)\n")
        return EXIT_ERROR

    module_line = f'module = "{args.module}"\n' if args.module else ""
    config_path.write_text(
        INIT_TEMPLATE.format(name=preset.name, module_line=module_line),
        encoding="utf-8",
    )
    sys.stdout.write(f"Wrote {config_path}\n")
    if args.create_dirs:
        for directory in sorted(preset.rule_set.structure.required_directories):
            (root / directory).mkdir(parents=True, exist_ok=True)
            sys.stdout.write(f"Created {directory}/\n")
    return EXIT_OK


def _handle_verify(args: argparse.Namespace, root: Path) -> int:
    report_path = Path(args.report).expanduser().resolve()
    coverage_path = _resolve_file(args.coverage_file)
    coverage = load_coverage_report(coverage_path) if coverage_path else None
    try:
        result = verify_determinism(
            root=root, report_path=report_path, coverage=coverage
        )
    except (FileNotFoundError, IsADirectoryError) as exc:
        sys.stderr.write(f"report: {report_path}\n")
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_ERROR
    if not result.ok:
        for key in result.mismatches:
            sys.stderr.write(f"mismatch: {key}\n")
        return EXIT_VIOLATIONS
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "presets":
            return _handle_presets()

        root = Path(args.root).expanduser().resolve()

        if args.command == "check":
            return _handle_check(args, root)

        if args.command == "init":
            return _handle_init(args, root)

        if args.command == "verify":
            return _handle_verify(args, root)
    except (ConfigError, ScanError, CoverageError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_ERROR

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
