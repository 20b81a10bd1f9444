"""Go source parsing into a typed node model."""

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
    ShapeMismatch,
    TypeRef,
    ValueDeclaration,
)
from .parser import FatalParseError, GoSourceParser, SourceParseError, parse_source

__all__ = [
    "CallExpression",
    "FatalParseError",
    "FunctionDeclaration",
    "GoSourceParser",
    "Identifier",
    "KeyValuePair",
    "Literal",
    "MapLiteral",
    "Node",
    "Opaque",
    "ReturnStatement",
    "ShapeMismatch",
    "SourceParseError",
    "TypeRef",
    "ValueDeclaration",
    "parse_source",
]
