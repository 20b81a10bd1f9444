"""Typed node model for the parts of Go source that provlint inspects.

The parser lowers a tree-sitter concrete syntax tree into this closed set of
variants. Anything outside the set becomes an :class:`Opaque` node, so every
extractor can match on node types without ever failing on an unexpected
shape. Extractors report those shapes as :class:`ShapeMismatch` values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Type, TypeVar, Union


@dataclass(frozen=True)
class Node:
    """Base class for every node variant; ``line`` is 1-based."""

    line: int


@dataclass(frozen=True)
class Literal(Node):
    """A basic literal. String values are stored without their delimiters."""

    value: str
    kind: str = "string"

    @property
    def is_string(self) -> bool:
        return self.kind == "string"


@dataclass(frozen=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True)
class CallExpression(Node):
    """A call such as ``resourceWidget()`` or ``pkg.Helper(x)``."""

    function: str
    qualifier: Optional[str] = None
    arguments: Tuple["Node", ...] = ()


@dataclass(frozen=True)
class KeyValuePair(Node):
    key: Node
    value: Node


@dataclass(frozen=True)
class MapLiteral(Node):
    """A composite literal: struct, map or slice, optionally taken by address."""

    type_name: Optional[str]
    elements: Tuple[Node, ...]
    address_of: bool = False

    def entries(self) -> Iterator[KeyValuePair]:
        for element in self.elements:
            if isinstance(element, KeyValuePair):
                yield element

    def field(self, name: str) -> Optional[Node]:
        """Return the value keyed by the bare identifier ``name``."""
        for entry in self.entries():
            if isinstance(entry.key, Identifier) and entry.key.name == name:
                return entry.value
        return None

    def field_names(self) -> Tuple[str, ...]:
        return tuple(
            entry.key.name for entry in self.entries() if isinstance(entry.key, Identifier)
        )


@dataclass(frozen=True)
class ReturnStatement(Node):
    results: Tuple[Node, ...]


@dataclass(frozen=True)
class TypeRef:
    """A declared result type such as ``*schema.Resource``."""

    text: str
    pointer: bool = False
    package: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class FunctionDeclaration(Node):
    name: str
    results: Tuple[TypeRef, ...]
    body: Tuple[Node, ...]


@dataclass(frozen=True)
class ValueDeclaration(Node):
    """One name bound by a ``const`` or ``var`` spec with all of the spec's values."""

    name: str
    values: Tuple[Node, ...]


@dataclass(frozen=True)
class Opaque(Node):
    """Any construct outside the modelled variants."""

    kind: str
    text: str = ""


@dataclass(frozen=True)
class ShapeMismatch:
    """Returned by extractors when a node does not have the expected shape."""

    expected: str
    actual: str
    line: int

    def describe(self) -> str:
        return f"expected {self.expected}, found {self.actual} at line {self.line}"


def describe_node(node: Node) -> str:
    if isinstance(node, Opaque):
        return node.kind
    if isinstance(node, Literal):
        return f"{node.kind} literal"
    if isinstance(node, Identifier):
        return f"identifier {node.name}"
    if isinstance(node, CallExpression):
        return f"call to {node.function}"
    if isinstance(node, MapLiteral):
        return "composite literal"
    if isinstance(node, KeyValuePair):
        return "keyed element"
    if isinstance(node, ReturnStatement):
        return "return statement"
    if isinstance(node, FunctionDeclaration):
        return f"function {node.name}"
    return type(node).__name__


N = TypeVar("N", bound=Node)


def expect(node: Node, kind: Type[N], expected: str) -> Union[N, ShapeMismatch]:
    """Return ``node`` when it is a ``kind``, otherwise a :class:`ShapeMismatch`."""
    if isinstance(node, kind):
        return node
    return ShapeMismatch(expected=expected, actual=describe_node(node), line=node.line)


def single_result(statement: Node, expected: str) -> Union[Node, ShapeMismatch]:
    """Return the only value of a return statement."""
    ret = expect(statement, ReturnStatement, "return statement")
    if isinstance(ret, ShapeMismatch):
        return ret
    if len(ret.results) != 1:
        return ShapeMismatch(
            expected=expected,
            actual=f"return of {len(ret.results)} values",
            line=ret.line,
        )
    return ret.results[0]


__all__ = [
    "CallExpression",
    "FunctionDeclaration",
    "Identifier",
    "KeyValuePair",
    "Literal",
    "MapLiteral",
    "Node",
    "Opaque",
    "ReturnStatement",
    "ShapeMismatch",
    "TypeRef",
    "ValueDeclaration",
    "describe_node",
    "expect",
    "single_result",
]
