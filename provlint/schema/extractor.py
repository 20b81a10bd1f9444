"""Recovery of attribute schemas from ``*schema.Resource`` constructors."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple, Union

from ..config import ConventionConfig
from ..logging import get_logger
from ..models import AttributeRecord, AttributeSchema, ConstructorSchema, SourceUnit
from ..syntax.nodes import (
    FunctionDeclaration,
    KeyValuePair,
    MapLiteral,
    ShapeMismatch,
    describe_node,
    expect,
    single_result,
)
from .symbols import SymbolTable

_LOGGER = get_logger("schema")

ExtractResult = Union[ConstructorSchema, ShapeMismatch]


class SchemaExtractor:
    """Extracts ordered attribute records from constructor functions."""

    def __init__(
        self, conventions: Optional[ConventionConfig] = None, *, verbose: bool = False
    ) -> None:
        self.conventions = conventions or ConventionConfig()
        self.verbose = verbose

    def is_constructor(self, function: FunctionDeclaration) -> bool:
        """Return True when ``function`` returns exactly one ``*schema.Resource``."""
        if len(function.results) != 1:
            if self.verbose and function.results:
                _LOGGER.debug("Ignoring %s because arity doesn't match", function.name)
            return False
        result = function.results[0]
        return (
            result.pointer
            and result.package == self.conventions.resource_package
            and result.name == self.conventions.resource_type
        )

    def constructors(self, unit: SourceUnit) -> Iterator[FunctionDeclaration]:
        for function in unit.functions:
            if self.is_constructor(function):
                yield function

    def extract(self, function: FunctionDeclaration, symbols: SymbolTable) -> ExtractResult:
        if not function.body:
            return ShapeMismatch("a return statement", "empty body", function.line)
        literal = single_result(function.body[0], "a single resource literal")
        if isinstance(literal, ShapeMismatch):
            return literal
        resource = expect(literal, MapLiteral, "a resource literal")
        if isinstance(resource, ShapeMismatch):
            return resource
        schema = self._schema(resource, symbols)
        if isinstance(schema, ShapeMismatch):
            return schema
        return ConstructorSchema(function=function.name, line=function.line, schema=schema)

    def _schema(
        self, resource: MapLiteral, symbols: SymbolTable
    ) -> Union[AttributeSchema, ShapeMismatch]:
        field = resource.field(self.conventions.schema_field)
        if field is None:
            return ShapeMismatch(
                f"a {self.conventions.schema_field} field", "no such field", resource.line
            )
        mapping = expect(field, MapLiteral, f"a {self.conventions.schema_field} map literal")
        if isinstance(mapping, ShapeMismatch):
            return mapping

        attributes: List[AttributeRecord] = []
        for element in mapping.elements:
            if not isinstance(element, KeyValuePair):
                if self.verbose:
                    _LOGGER.debug(
                        "Ignoring %s in schema at line %d", describe_node(element), element.line
                    )
                continue
            record = self._attribute(element, symbols)
            if record is not None:
                attributes.append(record)
        return AttributeSchema(attributes=tuple(attributes), line=mapping.line)

    def _attribute(self, pair: KeyValuePair, symbols: SymbolTable) -> Optional[AttributeRecord]:
        name = symbols.resolve(pair.key)
        if name is None:
            if self.verbose:
                _LOGGER.debug(
                    "Skipping attribute at line %d: cannot resolve %s",
                    pair.line,
                    describe_node(pair.key),
                )
            return None

        definition = pair.value
        if not isinstance(definition, MapLiteral):
            return AttributeRecord(name=name, line=pair.line, properties=None)

        properties = definition.field_names()
        return AttributeRecord(
            name=name,
            line=pair.line,
            properties=properties,
            has_description=self.conventions.description_field in properties,
            conflict_targets=self._conflicts(definition, symbols),
            nested=self._nested(definition, symbols),
        )

    def _conflicts(self, definition: MapLiteral, symbols: SymbolTable) -> Tuple[str, ...]:
        value = definition.field(self.conventions.conflicts_field)
        if not isinstance(value, MapLiteral):
            return ()
        targets: List[str] = []
        for element in value.elements:
            target = symbols.resolve(element)
            if target is None:
                if self.verbose:
                    _LOGGER.debug(
                        "Ignoring unresolved conflict target at line %d", element.line
                    )
                continue
            targets.append(target)
        return tuple(targets)

    def _nested(self, definition: MapLiteral, symbols: SymbolTable) -> Optional[AttributeSchema]:
        elem = definition.field(self.conventions.elem_field)
        if not isinstance(elem, MapLiteral):
            return None
        type_name = elem.type_name or ""
        if type_name.rsplit(".", 1)[-1] != self.conventions.resource_type:
            return None
        nested = self._schema(elem, symbols)
        if isinstance(nested, ShapeMismatch):
            if self.verbose:
                _LOGGER.debug("Ignoring nested schema: %s", nested.describe())
            return None
        return nested


__all__ = ["ExtractResult", "SchemaExtractor"]
