"""Same-file constant lookup."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from ..models import SourceUnit
from ..syntax.nodes import Identifier, Literal, Node, ValueDeclaration


class SymbolTable:
    """Resolves identifiers to string constants declared in the same file.

    Only ``const``/``var`` specs binding a single string literal resolve.
    References into other files or packages never do.
    """

    def __init__(self, declarations: Iterable[ValueDeclaration] = ()) -> None:
        self._declarations: Dict[str, ValueDeclaration] = {}
        for declaration in declarations:
            self._declarations.setdefault(declaration.name, declaration)

    @classmethod
    def from_unit(cls, unit: SourceUnit) -> "SymbolTable":
        return cls(unit.values)

    def lookup(self, name: str) -> Optional[ValueDeclaration]:
        return self._declarations.get(name)

    def resolve(self, node: Node) -> Optional[str]:
        if isinstance(node, Literal):
            return node.value if node.is_string else None
        if not isinstance(node, Identifier):
            return None
        declaration = self._declarations.get(node.name)
        if declaration is None or len(declaration.values) != 1:
            return None
        value = declaration.values[0]
        if isinstance(value, Literal) and value.is_string:
            return value.value
        return None

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)


__all__ = ["SymbolTable"]
