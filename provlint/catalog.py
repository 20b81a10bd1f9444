"""Extraction of the provider's resource and datasource catalog."""

from __future__ import annotations

from typing import List, Union

from .config import ConventionConfig
from .logging import get_logger
from .models import CatalogEntry, EntityKind, ProviderCatalog, SourceUnit
from .syntax.nodes import (
    CallExpression,
    Identifier,
    KeyValuePair,
    Literal,
    MapLiteral,
    Node,
    ReturnStatement,
    ShapeMismatch,
    describe_node,
    expect,
    single_result,
)
from .syntax.parser import FatalParseError

_LOGGER = get_logger("catalog")


class CatalogError(FatalParseError):
    """Raised when the registration declaration does not have the expected shape."""


def extract_catalog(
    unit: SourceUnit,
    conventions: ConventionConfig | None = None,
    *,
    strict: bool = False,
    verbose: bool = False,
) -> ProviderCatalog:
    """Return the ordered catalog declared by the registration function in ``unit``."""
    conventions = conventions or ConventionConfig()
    function = unit.function(conventions.registration_function)
    if function is None:
        raise CatalogError(
            f"{unit.path}: registration function {conventions.registration_function} not found"
        )

    returns = [stmt for stmt in function.body if isinstance(stmt, ReturnStatement)]
    if not returns:
        raise CatalogError(
            f"{unit.path}:{function.line}: {function.name} has no return statement"
        )

    fields = {
        conventions.resources_field: EntityKind.RESOURCE,
        conventions.datasources_field: EntityKind.DATASOURCE,
    }
    catalog = ProviderCatalog()
    for statement in returns:
        literal = _require(unit, single_result(statement, "a single structured literal"))
        literal = _require(unit, expect(literal, MapLiteral, "a structured literal"))
        for element in literal.elements:
            pair = _require(unit, expect(element, KeyValuePair, "a keyed field"))
            key = _require(unit, expect(pair.key, Identifier, "a field name"))
            kind = fields.get(key.name)
            if kind is None:
                if verbose:
                    _LOGGER.debug("Ignoring provider field %s", key.name)
                continue
            for entry in _map_entries(unit, pair.value, kind):
                _add(catalog, entry, strict=strict, path=str(unit.path))

    if verbose:
        _LOGGER.debug(
            "Catalog: %d resources, %d datasources",
            len(catalog.resources),
            len(catalog.datasources),
        )
    return catalog


def _map_entries(unit: SourceUnit, value: Node, kind: EntityKind) -> List[CatalogEntry]:
    mapping = _require(unit, expect(value, MapLiteral, f"a {kind} map literal"))
    entries: List[CatalogEntry] = []
    for element in mapping.elements:
        pair = _require(unit, expect(element, KeyValuePair, f"a {kind} map entry"))
        key = _require(unit, expect(pair.key, Literal, f"a {kind} name string"))
        if not key.is_string:
            _fail(unit, ShapeMismatch(f"a {kind} name string", describe_node(key), key.line))
        call = _require(unit, expect(pair.value, CallExpression, f"a {kind} constructor call"))
        entries.append(
            CatalogEntry(
                declared_name=key.value,
                constructor_name=call.function,
                kind=kind,
                line=pair.line,
            )
        )
    return entries


def _add(catalog: ProviderCatalog, entry: CatalogEntry, *, strict: bool, path: str) -> None:
    previous = catalog.lookup(entry.kind, entry.declared_name)
    if previous is not None:
        message = (
            f"{path}:{entry.line}: duplicate {entry.kind} {entry.declared_name!r} "
            f"shadows the declaration at line {previous.line}"
        )
        if strict:
            raise CatalogError(message)
        _LOGGER.warning(message)
    catalog.of_kind(entry.kind).append(entry)


def _require(unit: SourceUnit, result: Union[Node, ShapeMismatch]):  # type: ignore[no-untyped-def]
    if isinstance(result, ShapeMismatch):
        _fail(unit, result)
    return result


def _fail(unit: SourceUnit, mismatch: ShapeMismatch) -> None:
    raise CatalogError(f"{unit.path}:{mismatch.line}: provider declaration {mismatch.describe()}")


__all__ = ["CatalogError", "extract_catalog"]
