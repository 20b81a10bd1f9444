"""Tests for the tree-sitter backed Go parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from provlint.syntax.nodes import (
    CallExpression,
    Identifier,
    KeyValuePair,
    Literal,
    MapLiteral,
    Opaque,
    ReturnStatement,
)
from provlint.syntax.parser import GoSourceParser, SourceParseError, parse_source

SOURCE = b"""package acme

import "github.com/hashicorp/terraform/helper/schema"

const attrName = "name"

const (
	attrZone        = `zone`
	attrA, attrB    = "a", "b"
)

var attrTags = "tags"

func resourceWidget() *schema.Resource {
	// comments are ignored
	return &schema.Resource{
		Create: resourceWidgetCreate,
		Schema: map[string]*schema.Schema{
			attrName: {
				Type: schema.TypeString,
			},
			"size": &schema.Schema{
				Type:          schema.TypeInt,
				ConflictsWith: []string{"name"},
			},
		},
	}
}

func helper() (*schema.Resource, error) {
	return nil, nil
}

func noResult() {
	x := 1
	_ = x
}

func call() *schema.Resource {
	return other.Build("x")
}
"""


@pytest.fixture
def unit():  # type: ignore[no-untyped-def]
    return GoSourceParser().parse(Path("resource_widget.go"), SOURCE)


def test_parser_collects_functions_in_order(unit) -> None:  # type: ignore[no-untyped-def]
    assert [fn.name for fn in unit.functions] == ["resourceWidget", "helper", "noResult", "call"]


def test_parser_describes_result_types(unit) -> None:  # type: ignore[no-untyped-def]
    widget = unit.function("resourceWidget")
    assert widget is not None
    (result,) = widget.results
    assert result.pointer is True
    assert result.package == "schema"
    assert result.name == "Resource"

    helper = unit.function("helper")
    assert helper is not None
    assert len(helper.results) == 2
    assert helper.results[1].name == "error"

    no_result = unit.function("noResult")
    assert no_result is not None
    assert no_result.results == ()


def test_parser_lowers_return_of_composite_literal(unit) -> None:  # type: ignore[no-untyped-def]
    widget = unit.function("resourceWidget")
    assert widget is not None
    statement = widget.body[0]
    assert isinstance(statement, ReturnStatement)
    (literal,) = statement.results
    assert isinstance(literal, MapLiteral)
    assert literal.address_of is True
    assert literal.type_name == "schema.Resource"
    assert literal.field_names() == ("Create", "Schema")

    schema_map = literal.field("Schema")
    assert isinstance(schema_map, MapLiteral)
    first, second = list(schema_map.entries())
    assert isinstance(first.key, Identifier)
    assert first.key.name == "attrName"
    assert isinstance(first.value, MapLiteral)
    assert first.value.type_name is None

    assert isinstance(second.key, Literal)
    assert second.key.value == "size"
    assert isinstance(second.value, MapLiteral)
    conflicts = second.value.field("ConflictsWith")
    assert isinstance(conflicts, MapLiteral)
    assert [element.value for element in conflicts.elements if isinstance(element, Literal)] == [
        "name"
    ]


def test_parser_records_lines(unit) -> None:  # type: ignore[no-untyped-def]
    widget = unit.function("resourceWidget")
    assert widget is not None
    assert widget.line == 14
    literal = widget.body[0].results[0]  # type: ignore[attr-defined]
    schema_map = literal.field("Schema")
    first = next(schema_map.entries())
    assert isinstance(first, KeyValuePair)
    assert first.line == 19


def test_parser_lowers_other_statements_and_calls(unit) -> None:  # type: ignore[no-untyped-def]
    no_result = unit.function("noResult")
    assert no_result is not None
    assert all(isinstance(stmt, Opaque) for stmt in no_result.body)

    call = unit.function("call")
    assert call is not None
    (value,) = call.body[0].results  # type: ignore[attr-defined]
    assert isinstance(value, CallExpression)
    assert value.function == "Build"
    assert value.qualifier == "other"
    assert value.arguments == (Literal(line=value.line, value="x"),)


def test_parser_collects_value_declarations(unit) -> None:  # type: ignore[no-untyped-def]
    by_name = {value.name: value for value in unit.values}
    assert set(by_name) == {"attrName", "attrZone", "attrA", "attrB", "attrTags"}
    assert by_name["attrName"].values == (Literal(line=5, value="name"),)
    assert by_name["attrZone"].values[0].value == "zone"  # type: ignore[attr-defined]
    assert len(by_name["attrA"].values) == 2
    assert by_name["attrTags"].values[0].value == "tags"  # type: ignore[attr-defined]


def test_parser_rejects_syntax_errors() -> None:
    with pytest.raises(SourceParseError) as excinfo:
        parse_source(Path("broken.go"), b"package acme\n\nfunc broken( {\n")
    assert excinfo.value.path == Path("broken.go")


def test_parse_source_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "provider.go"
    path.write_bytes(SOURCE)
    unit = parse_source(path)
    assert unit.path == path
    assert unit.function("helper") is not None
