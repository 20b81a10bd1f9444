"""Built-in API design rules."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..models import AttributeRecord, AttributeSchema
from .base import Rule


class MissingDescriptionRule(Rule):
    """Every attribute must set a description, whatever its value."""

    name = "missing-description"
    recursive = True

    def __init__(self, field: str = "Description") -> None:
        self.field = field

    def check(self, attribute: AttributeRecord, schema: AttributeSchema) -> Optional[str]:
        if attribute.has_description:
            return None
        return f"{attribute.name}: Missing {self.field} attribute"


class ReservedNameRule(Rule):
    """Top-level attributes must not reuse names reserved by the framework."""

    name = "reserved-name"

    def __init__(self, reserved: Iterable[str] = ("id",)) -> None:
        self.reserved = frozenset(reserved)

    def check(self, attribute: AttributeRecord, schema: AttributeSchema) -> Optional[str]:
        if attribute.name in self.reserved:
            return f"{attribute.name}: attribute name is reserved"
        return None


class DanglingConflictRule(Rule):
    """Conflict targets must name attributes that exist in the schema.

    A plain name may match an attribute at any depth. A dotted path such as
    ``block.0.attr`` must resolve segment by segment from the top-level
    schema through nested ``Elem`` schemas; index segments are skipped.
    """

    name = "dangling-conflict"
    recursive = True

    def check(self, attribute: AttributeRecord, schema: AttributeSchema) -> Optional[str]:
        if not attribute.conflict_targets:
            return None
        known = schema.names()
        errors: List[str] = []
        for target in attribute.conflict_targets:
            if "." in target:
                found = _resolve_path(target, schema)
            else:
                found = target in known
            if not found:
                errors.append(f'conflict target "{target}" does not exist')
        if not errors:
            return None
        return f"{attribute.name}: {', '.join(errors)}"


def _resolve_path(target: str, schema: AttributeSchema) -> bool:
    segments = [segment for segment in target.split(".") if segment and not segment.isdigit()]
    if not segments:
        return False
    current: Optional[AttributeSchema] = schema
    for segment in segments:
        if current is None:
            return False
        found = current.get(segment)
        if found is None:
            return False
        current = found.nested
    return True


__all__ = ["DanglingConflictRule", "MissingDescriptionRule", "ReservedNameRule"]
