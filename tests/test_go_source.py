from __future__ import annotations

import pytest

from parse.go_source import SourceParseError, default_import_name, parse_go_source

SOURCE = b"""// Package main wires the application.
package main

import "fmt"

import (
\t"os"
\tstore "example.com/app/internal/store"
\t_ "github.com/lib/pq"
\t. "strings"
\t"github.com/jackc/pgx/v5"
)

func main() {
\tdb := store.New(os.Getenv("DSN"))
\tvar conn *pgx.Conn
\tfmt.Println(db, conn, ToUpper("x"))
}
"""


def test_parse_go_source_package_and_imports_in_order() -> None:
    parsed = parse_go_source(SOURCE)

    assert parsed.package == "main"
    assert parsed.imports == [
        "fmt",
        "os",
        "example.com/app/internal/store",
        "github.com/lib/pq",
        "strings",
        "github.com/jackc/pgx/v5",
    ]


def test_parse_go_source_aliases_skip_blank_and_dot_imports() -> None:
    parsed = parse_go_source(SOURCE)

    assert parsed.aliases == {
        "fmt": "fmt",
        "os": "os",
        "store": "example.com/app/internal/store",
        "pgx": "github.com/jackc/pgx/v5",
    }


def test_parse_go_source_usages_only_when_requested() -> None:
    assert parse_go_source(SOURCE).used_symbols == {}

    parsed = parse_go_source(SOURCE, include_usages=True)

    assert parsed.used_symbols == {
        "example.com/app/internal/store": ["New"],
        "fmt": ["Println"],
        "github.com/jackc/pgx/v5": ["Conn"],
        "os": ["Getenv"],
    }


def test_parse_go_source_test_package_name() -> None:
    parsed = parse_go_source(b'package store_test\n\nimport "testing"\n')

    assert parsed.package == "store_test"
    assert parsed.imports == ["testing"]


def test_parse_go_source_without_package_clause_rejected() -> None:
    with pytest.raises(SourceParseError, match="missing package clause"):
        parse_go_source(b"// just a comment\n")


def test_parse_go_source_invalid_utf8_rejected() -> None:
    with pytest.raises(SourceParseError, match="not valid UTF-8"):
        parse_go_source(b'package a\n\nimport "x\xff"\n')


@pytest.mark.parametrize(
    ("import_path", "expected"),
    [
        ("fmt", "fmt"),
        ("net/http", "http"),
        ("github.com/jackc/pgx/v5", "pgx"),
    ],
)
def test_default_import_name(import_path: str, expected: str) -> None:
    assert default_import_name(import_path) == expected
