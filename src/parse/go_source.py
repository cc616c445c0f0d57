"""Tree-sitter based Go source parsing for layerlint."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser
from tree_sitter_go import language as get_go_language

if TYPE_CHECKING:
    from pathlib import Path

_PARSER: Parser | None = None

_MAJOR_VERSION_SUFFIX = re.compile(r"^v[0-9]+$")


class SourceParseError(ValueError):
    """Raised when a Go file has no recognizable package clause."""


@dataclass
class ParsedSource:
    package: str
    imports: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)
    used_symbols: dict[str, list[str]] = field(default_factory=dict)


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the Go language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_go_language())
        _PARSER = Parser(lang)

    return _PARSER


def _node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf8")


def _unquote(literal: str) -> str:
    if len(literal) >= 2 and literal[0] in "\"`" and literal[-1] == literal[0]:
        return literal[1:-1]
    return literal


def default_import_name(import_path: str) -> str:
    """Return the identifier an unaliased import is referenced by.

    Examples:
        >>> default_import_name("github.com/user/repo/internal/store")
        'store'
        >>> default_import_name("github.com/jackc/pgx/v5")
        'pgx'
    """
    parts = [part for part in import_path.split("/") if part]
    if not parts:
        return import_path
    if len(parts) > 1 and _MAJOR_VERSION_SUFFIX.match(parts[-1]):
        return parts[-2]
    return parts[-1]


def _iter_import_specs(declaration: Node) -> list[Node]:
    specs: list[Node] = []
    for child in declaration.named_children:
        if child.type == "import_spec":
            specs.append(child)
        elif child.type == "import_spec_list":
            specs.extend(
                spec for spec in child.named_children if spec.type == "import_spec"
            )
    return specs


def _collect_imports(root: Node, parsed: ParsedSource) -> None:
    for child in root.named_children:
        if child.type != "import_declaration":
            continue
        for spec in _iter_import_specs(child):
            import_path = _unquote(_node_text(spec.child_by_field_name("path")))
            if not import_path:
                continue
            parsed.imports.append(import_path)

            name_node = spec.child_by_field_name("name")
            alias = _node_text(name_node)
            if alias in ("_", "."):
                continue
            parsed.aliases[alias or default_import_name(import_path)] = import_path


def _collect_used_symbols(root: Node, parsed: ParsedSource) -> None:
    """Record ``pkg.Symbol`` references for every imported package name."""
    usages: dict[str, set[str]] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        qualifier = ""
        symbol = ""
        if node.type == "selector_expression":
            operand = node.child_by_field_name("operand")
            if operand is not None and operand.type == "identifier":
                qualifier = _node_text(operand)
                symbol = _node_text(node.child_by_field_name("field"))
        elif node.type == "qualified_type":
            qualifier = _node_text(node.child_by_field_name("package"))
            symbol = _node_text(node.child_by_field_name("name"))

        import_path = parsed.aliases.get(qualifier)
        if import_path and symbol:
            usages.setdefault(import_path, set()).add(symbol)

        stack.extend(node.children)

    parsed.used_symbols = {path: sorted(symbols) for path, symbols in usages.items()}


def parse_go_source(source: bytes, *, include_usages: bool = False) -> ParsedSource:
    """Extract the package clause and imports from Go source.

    Args:
        source: Raw file contents
        include_usages: Also record which exported symbols are used from
            each import (selector expressions and qualified types)

    Returns:
        ParsedSource with the declared package and imports in file order.

    Raises:
        SourceParseError: If the file is not valid UTF-8 or has no package
            clause.
    """
    try:
        source.decode("utf8")
    except UnicodeDecodeError as exc:
        msg = f"source is not valid UTF-8 (byte offset {exc.start})"
        raise SourceParseError(msg) from exc

    tree = _get_parser().parse(source)
    root = tree.root_node

    package = ""
    for child in root.named_children:
        if child.type == "package_clause":
            for ident in child.named_children:
                if ident.type == "package_identifier":
                    package = _node_text(ident)
                    break
            break

    if not package:
        msg = "missing package clause"
        raise SourceParseError(msg)

    parsed = ParsedSource(package=package)
    _collect_imports(root, parsed)
    if include_usages:
        _collect_used_symbols(root, parsed)
    return parsed


def parse_go_file(path: Path, *, include_usages: bool = False) -> ParsedSource:
    """Parse a Go file from disk."""
    return parse_go_source(path.read_bytes(), include_usages=include_usages)


__all__ = [
    "ParsedSource",
    "SourceParseError",
    "default_import_name",
    "parse_go_file",
    "parse_go_source",
]
