"""Tree-sitter powered Go source parser."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

import tree_sitter_go
from tree_sitter import Language, Parser

from ..logging import get_logger
from ..models import SourceUnit
from .nodes import (
    CallExpression,
    FunctionDeclaration,
    Identifier,
    KeyValuePair,
    Literal,
    MapLiteral,
    Node,
    Opaque,
    ReturnStatement,
    TypeRef,
    ValueDeclaration,
)

_LOGGER = get_logger("syntax")

GO_LANGUAGE = Language(tree_sitter_go.language())

_STRING_LITERALS = {"interpreted_string_literal", "raw_string_literal"}
_OTHER_LITERALS = {
    "int_literal": "int",
    "float_literal": "float",
    "imaginary_literal": "imaginary",
    "rune_literal": "rune",
    "true": "bool",
    "false": "bool",
    "nil": "nil",
}
_IGNORED = {"comment"}


class FatalParseError(RuntimeError):
    """Raised when input cannot be modelled and the whole run must stop."""


class SourceParseError(FatalParseError):
    """Raised when a source file contains syntax errors."""

    def __init__(self, path: Path, line: int) -> None:
        super().__init__(f"{path}:{line}: syntax error")
        self.path = path
        self.line = line


class GoSourceParser:
    """Parses Go files into :class:`SourceUnit` instances."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)

    def parse_file(self, path: Path) -> SourceUnit:
        return self.parse(path, path.read_bytes())

    def parse(self, path: Path, source: bytes) -> SourceUnit:
        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            raise SourceParseError(path, _first_error_line(root))

        lowering = _Lowering(source)
        functions: List[FunctionDeclaration] = []
        values: List[ValueDeclaration] = []
        for child in _named(root):
            if child.type == "function_declaration":
                functions.append(lowering.function(child))
        for spec in _descendants(root, {"const_spec", "var_spec"}):
            values.extend(lowering.value_spec(spec))
        _LOGGER.debug("Parsed %s: %d functions, %d values", path, len(functions), len(values))
        return SourceUnit(path=path, functions=tuple(functions), values=tuple(values))


def _named(node) -> Iterator:  # type: ignore[no-untyped-def]
    for child in node.named_children:
        if child.type not in _IGNORED:
            yield child


def _descendants(node, types: set) -> Iterator:  # type: ignore[no-untyped-def]
    for child in node.named_children:
        if child.type in types:
            yield child
        else:
            yield from _descendants(child, types)


def _first_error_line(node) -> int:  # type: ignore[no-untyped-def]
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error or child.is_missing:
            return _first_error_line(child)
    return node.start_point[0] + 1


class _Lowering:
    """Converts tree-sitter nodes of one file into typed nodes."""

    def __init__(self, source: bytes) -> None:
        self._source = source

    def _text(self, node) -> str:  # type: ignore[no-untyped-def]
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    @staticmethod
    def _line(node) -> int:  # type: ignore[no-untyped-def]
        return node.start_point[0] + 1

    def function(self, node) -> FunctionDeclaration:  # type: ignore[no-untyped-def]
        name_node = node.child_by_field_name("name")
        result = node.child_by_field_name("result")
        body = node.child_by_field_name("body")
        return FunctionDeclaration(
            line=self._line(node),
            name=self._text(name_node) if name_node else "",
            results=tuple(self._results(result)) if result is not None else (),
            body=tuple(self.statement(stmt) for stmt in self._statements(body)),
        )

    def _statements(self, block) -> Iterator:  # type: ignore[no-untyped-def]
        if block is None:
            return
        for child in _named(block):
            # Newer grammars wrap block contents in a statement_list node.
            if child.type == "statement_list":
                yield from _named(child)
            else:
                yield child

    def _results(self, node) -> Iterator[TypeRef]:  # type: ignore[no-untyped-def]
        if node.type != "parameter_list":
            yield self.type_ref(node)
            return
        for param in _named(node):
            type_node = param.child_by_field_name("type")
            if type_node is None:
                continue
            names = [n for n in param.children_by_field_name("name") if n.type == "identifier"]
            for _ in range(max(len(names), 1)):
                yield self.type_ref(type_node)

    def type_ref(self, node) -> TypeRef:  # type: ignore[no-untyped-def]
        text = self._text(node)
        pointer = False
        target = node
        if node.type == "pointer_type":
            pointer = True
            inner = list(_named(node))
            if inner:
                target = inner[0]
        if target.type == "qualified_type":
            package = target.child_by_field_name("package")
            name = target.child_by_field_name("name")
            return TypeRef(
                text=text,
                pointer=pointer,
                package=self._text(package) if package else None,
                name=self._text(name) if name else None,
            )
        return TypeRef(text=text, pointer=pointer, name=self._text(target))

    def statement(self, node) -> Node:  # type: ignore[no-untyped-def]
        if node.type == "return_statement":
            results: Tuple[Node, ...] = ()
            for child in _named(node):
                if child.type == "expression_list":
                    results = tuple(self.expression(expr) for expr in _named(child))
                else:
                    results = (self.expression(child),)
            return ReturnStatement(line=self._line(node), results=results)
        return Opaque(line=self._line(node), kind=node.type, text=self._text(node))

    def expression(self, node) -> Node:  # type: ignore[no-untyped-def]
        kind = node.type
        line = self._line(node)
        if kind in {"literal_element", "parenthesized_expression"}:
            inner = list(_named(node))
            if len(inner) == 1:
                return self.expression(inner[0])
        if kind in _STRING_LITERALS:
            return Literal(line=line, value=_decode_string(self._text(node)))
        if kind in _OTHER_LITERALS:
            return Literal(line=line, value=self._text(node), kind=_OTHER_LITERALS[kind])
        if kind in {"identifier", "field_identifier"}:
            return Identifier(line=line, name=self._text(node))
        if kind == "call_expression":
            return self._call(node)
        if kind == "composite_literal":
            type_node = node.child_by_field_name("type")
            body = node.child_by_field_name("body")
            return MapLiteral(
                line=line,
                type_name=self._text(type_node) if type_node else None,
                elements=self._elements(body),
            )
        if kind == "literal_value":
            return MapLiteral(line=line, type_name=None, elements=self._elements(node))
        if kind == "unary_expression":
            operator = node.child_by_field_name("operator")
            operand = node.child_by_field_name("operand")
            if operator is not None and operand is not None and self._text(operator) == "&":
                inner = self.expression(operand)
                if isinstance(inner, MapLiteral):
                    return MapLiteral(
                        line=line,
                        type_name=inner.type_name,
                        elements=inner.elements,
                        address_of=True,
                    )
        if kind == "keyed_element":
            return self._keyed(node)
        return Opaque(line=line, kind=kind, text=self._text(node))

    def _call(self, node) -> Node:  # type: ignore[no-untyped-def]
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        args = tuple(self.expression(arg) for arg in _named(arguments)) if arguments else ()
        if function is not None and function.type == "identifier":
            return CallExpression(
                line=self._line(node), function=self._text(function), arguments=args
            )
        if function is not None and function.type == "selector_expression":
            operand = function.child_by_field_name("operand")
            field = function.child_by_field_name("field")
            if field is not None:
                return CallExpression(
                    line=self._line(node),
                    function=self._text(field),
                    qualifier=self._text(operand) if operand else None,
                    arguments=args,
                )
        return Opaque(line=self._line(node), kind="call_expression", text=self._text(node))

    def _elements(self, body) -> Tuple[Node, ...]:  # type: ignore[no-untyped-def]
        if body is None:
            return ()
        return tuple(self.expression(child) for child in _named(body))

    def _keyed(self, node) -> Node:  # type: ignore[no-untyped-def]
        key = node.child_by_field_name("key")
        value = node.child_by_field_name("value")
        if key is None or value is None:
            # Older grammars expose key and value as plain children.
            parts = list(_named(node))
            if len(parts) != 2:
                return Opaque(line=self._line(node), kind="keyed_element", text=self._text(node))
            key, value = parts
        return KeyValuePair(
            line=self._line(node),
            key=self.expression(key),
            value=self.expression(value),
        )

    def value_spec(self, node) -> Iterable[ValueDeclaration]:  # type: ignore[no-untyped-def]
        names = [n for n in node.children_by_field_name("name") if n.type == "identifier"]
        value_list = node.child_by_field_name("value")
        values: Tuple[Node, ...] = ()
        if value_list is not None:
            if value_list.type == "expression_list":
                values = tuple(self.expression(expr) for expr in _named(value_list))
            else:
                values = (self.expression(value_list),)
        for name in names:
            yield ValueDeclaration(line=self._line(node), name=self._text(name), values=values)


def _decode_string(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in {'"', "`"}:
        return text[1:-1]
    return text


def parse_source(path: Path, source: Optional[bytes] = None) -> SourceUnit:
    """Parse a single file; convenience wrapper around :class:`GoSourceParser`."""
    parser = GoSourceParser()
    if source is None:
        return parser.parse_file(path)
    return parser.parse(path, source)


__all__ = [
    "FatalParseError",
    "GO_LANGUAGE",
    "GoSourceParser",
    "SourceParseError",
    "parse_source",
]
