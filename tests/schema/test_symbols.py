"""Tests for same-file symbol resolution."""

from __future__ import annotations

from pathlib import Path

from provlint.schema import SymbolTable
from provlint.syntax.nodes import CallExpression, Identifier, Literal, ValueDeclaration
from provlint.syntax.parser import parse_source

SOURCE = b"""package acme

const (
	attrName       = "name"
	attrA, attrB   = "a", "b"
	attrCount      = 3
)

var attrLabel = `label`

var attrComputed = strings.ToLower("X")

const attrName = "shadowed"
"""


def _table() -> SymbolTable:
    return SymbolTable.from_unit(parse_source(Path("consts.go"), SOURCE))


def test_resolves_single_string_constants() -> None:
    table = _table()
    assert table.resolve(Identifier(line=1, name="attrName")) == "name"
    assert table.resolve(Identifier(line=1, name="attrLabel")) == "label"


def test_first_declaration_wins() -> None:
    declaration = _table().lookup("attrName")
    assert declaration is not None
    assert declaration.line == 4


def test_does_not_resolve_multi_valued_or_non_literal_initializers() -> None:
    table = _table()
    assert table.resolve(Identifier(line=1, name="attrA")) is None
    assert table.resolve(Identifier(line=1, name="attrB")) is None
    assert table.resolve(Identifier(line=1, name="attrCount")) is None
    assert table.resolve(Identifier(line=1, name="attrComputed")) is None


def test_does_not_resolve_unknown_identifiers() -> None:
    table = _table()
    assert "attrMissing" not in table
    assert table.resolve(Identifier(line=1, name="attrMissing")) is None


def test_resolves_string_literals_directly() -> None:
    table = SymbolTable()
    assert table.resolve(Literal(line=1, value="zone")) == "zone"
    assert table.resolve(Literal(line=1, value="1", kind="int")) is None
    assert table.resolve(CallExpression(line=1, function="name")) is None


def test_table_accepts_explicit_declarations() -> None:
    table = SymbolTable(
        [ValueDeclaration(line=1, name="attrZone", values=(Literal(line=1, value="zone"),))]
    )
    assert len(table) == 1
    assert table.resolve(Identifier(line=2, name="attrZone")) == "zone"
