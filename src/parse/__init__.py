"""Parsing utilities for Go sources."""

from parse.go_source import (
    ParsedSource,
    SourceParseError,
    default_import_name,
    parse_go_file,
    parse_go_source,
)

__all__ = [
    "ParsedSource",
    "SourceParseError",
    "default_import_name",
    "parse_go_file",
    "parse_go_source",
]
