"""Tests for schema extraction from constructor functions."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from provlint.config import ConventionConfig
from provlint.models import ConstructorSchema, SourceUnit
from provlint.schema import SchemaExtractor, SymbolTable
from provlint.syntax.nodes import ShapeMismatch
from provlint.syntax.parser import parse_source

SOURCE = b"""package acme

const attrZone = "zone"

func resourceWidget() *schema.Resource {
	return &schema.Resource{
		Create: resourceWidgetCreate,
		Schema: map[string]*schema.Schema{
			"name": {
				Type:        schema.TypeString,
				Required:    true,
				Description: "",
			},
			attrZone: {
				Type:          schema.TypeString,
				Optional:      true,
				ConflictsWith: []string{"name", attrZone, unknownConst},
			},
			attrUnknown: {
				Type: schema.TypeString,
			},
			"tags": tagsSchema(),
			"rule": {
				Type:     schema.TypeList,
				Optional: true,
				Elem: &schema.Resource{
					Schema: map[string]*schema.Schema{
						"port": {
							Type:        schema.TypeInt,
							Description: "Port.",
						},
					},
				},
			},
			"aliases": {
				Type: schema.TypeSet,
				Elem: &schema.Schema{Type: schema.TypeString},
			},
		},
	}
}

func resourceBuilt() *schema.Resource {
	r := &schema.Resource{}
	return r
}

func resourceNoSchema() *schema.Resource {
	return &schema.Resource{
		Read: resourceNoSchemaRead,
	}
}

func resourceFromHelper() *schema.Resource {
	return &schema.Resource{
		Schema: widgetSchema(),
	}
}

func resourceWidgetCreate(d *schema.ResourceData, meta interface{}) error {
	return nil
}

func dataSourceOrError() (*schema.Resource, error) {
	return nil, nil
}

func notAResource() *schema.Schema {
	return &schema.Schema{}
}

func valueResource() schema.Resource {
	return schema.Resource{}
}
"""


@pytest.fixture
def unit() -> SourceUnit:
    return parse_source(Path("resource_widget.go"), SOURCE)


def _extract(unit: SourceUnit, name: str, **kwargs):  # type: ignore[no-untyped-def]
    function = unit.function(name)
    assert function is not None
    return SchemaExtractor(**kwargs).extract(function, SymbolTable.from_unit(unit))


def test_constructors_require_single_resource_pointer(unit: SourceUnit) -> None:
    names = [fn.name for fn in SchemaExtractor().constructors(unit)]
    assert names == ["resourceWidget", "resourceBuilt", "resourceNoSchema", "resourceFromHelper"]


def test_extract_recovers_ordered_attributes(unit: SourceUnit) -> None:
    result = _extract(unit, "resourceWidget")
    assert isinstance(result, ConstructorSchema)
    assert result.function == "resourceWidget"
    assert [attr.name for attr in result.schema.attributes] == [
        "name",
        "zone",
        "tags",
        "rule",
        "aliases",
    ]


def test_extract_records_properties(unit: SourceUnit) -> None:
    result = _extract(unit, "resourceWidget")
    assert isinstance(result, ConstructorSchema)
    schema = result.schema

    name = schema.get("name")
    assert name is not None
    assert name.has_description is True
    assert name.properties == ("Type", "Required", "Description")
    assert name.line == 9

    zone = schema.get("zone")
    assert zone is not None
    assert zone.has_description is False
    assert zone.conflict_targets == ("name", "zone")

    tags = schema.get("tags")
    assert tags is not None
    assert tags.is_opaque
    assert tags.has_description is False


def test_extract_recovers_nested_schemas(unit: SourceUnit) -> None:
    result = _extract(unit, "resourceWidget")
    assert isinstance(result, ConstructorSchema)

    rule = result.schema.get("rule")
    assert rule is not None and rule.nested is not None
    assert [attr.name for attr in rule.nested.attributes] == ["port"]
    assert rule.nested.attributes[0].has_description is True

    aliases = result.schema.get("aliases")
    assert aliases is not None
    assert aliases.nested is None

    assert result.schema.names() == {"name", "zone", "tags", "rule", "port", "aliases"}


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("resourceBuilt", "return statement"),
        ("resourceNoSchema", "Schema field"),
        ("resourceFromHelper", "Schema map literal"),
    ],
)
def test_extract_reports_shape_mismatches(unit: SourceUnit, name: str, expected: str) -> None:
    result = _extract(unit, name)
    assert isinstance(result, ShapeMismatch)
    assert expected in result.expected


def test_unresolved_keys_are_logged_only_when_verbose(
    unit: SourceUnit, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger="provlint"):
        _extract(unit, "resourceWidget")
    assert "cannot resolve" not in caplog.text

    with caplog.at_level(logging.DEBUG, logger="provlint"):
        _extract(unit, "resourceWidget", verbose=True)
    assert "cannot resolve identifier attrUnknown" in caplog.text


def test_extractor_honours_custom_conventions() -> None:
    source = b"""package acme

func resourceThing() *sdk.Resource {
	return &sdk.Resource{
		Attributes: map[string]*sdk.Attribute{
			"name": {Doc: "Name."},
		},
	}
}
"""
    unit = parse_source(Path("thing.go"), source)
    conventions = ConventionConfig(
        resource_package="sdk", schema_field="Attributes", description_field="Doc"
    )
    result = _extract(unit, "resourceThing", conventions=conventions)
    assert isinstance(result, ConstructorSchema)
    assert result.schema.attributes[0].has_description is True
