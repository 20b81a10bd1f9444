"""Core data models shared across provlint components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Set, Tuple

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .syntax.nodes import FunctionDeclaration, ValueDeclaration


class EntityKind(Enum):
    """The two kinds of entity a provider registers."""

    RESOURCE = "resource"
    DATASOURCE = "datasource"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceUnit:
    """One parsed source file."""

    path: Path
    functions: Tuple["FunctionDeclaration", ...]
    values: Tuple["ValueDeclaration", ...] = ()

    def function(self, name: str) -> Optional["FunctionDeclaration"]:
        for candidate in self.functions:
            if candidate.name == name:
                return candidate
        return None


@dataclass(frozen=True)
class CatalogEntry:
    """A declared resource or datasource bound to its constructor function."""

    declared_name: str
    constructor_name: str
    kind: EntityKind
    line: int = 0


@dataclass
class ProviderCatalog:
    """Ordered resources and datasources declared by the provider."""

    resources: List[CatalogEntry] = field(default_factory=list)
    datasources: List[CatalogEntry] = field(default_factory=list)

    @property
    def entries(self) -> List[CatalogEntry]:
        return [*self.resources, *self.datasources]

    def of_kind(self, kind: EntityKind) -> List[CatalogEntry]:
        return self.resources if kind is EntityKind.RESOURCE else self.datasources

    def lookup(self, kind: EntityKind, declared_name: str) -> Optional[CatalogEntry]:
        """Return the effective entry for ``declared_name``; later entries shadow earlier ones."""
        found: Optional[CatalogEntry] = None
        for entry in self.of_kind(kind):
            if entry.declared_name == declared_name:
                found = entry
        return found

    def entries_for(self, constructor_name: str) -> List[CatalogEntry]:
        """Return the effective entries bound to ``constructor_name``."""
        return [
            entry
            for entry in self.entries
            if entry.constructor_name == constructor_name
            and self.lookup(entry.kind, entry.declared_name) is entry
        ]

    def constructor_names(self) -> Set[str]:
        return {entry.constructor_name for entry in self.entries}


@dataclass(frozen=True)
class DocFragment:
    """Raw documentation file content."""

    content: bytes
    path: Path


@dataclass(frozen=True)
class ClassifiedDoc:
    """A documentation fragment tied to a kind and canonical entity name."""

    canonical_name: str
    kind: EntityKind
    content: bytes
    path: Optional[Path] = None


@dataclass(frozen=True)
class AttributeRecord:
    """A named configuration field of a schema.

    ``properties`` lists the property names set on the definition, or is
    ``None`` when the definition is not a literal the extractor can read.
    """

    name: str
    line: int
    properties: Optional[Tuple[str, ...]] = ()
    has_description: bool = False
    conflict_targets: Tuple[str, ...] = ()
    nested: Optional["AttributeSchema"] = None

    @property
    def is_opaque(self) -> bool:
        return self.properties is None


@dataclass(frozen=True)
class AttributeSchema:
    """Ordered attributes of one schema map."""

    attributes: Tuple[AttributeRecord, ...]
    line: int = 0

    def names(self) -> Set[str]:
        """Return every attribute name in this schema and all nested schemas."""
        collected: Set[str] = set()
        for attribute in self.attributes:
            collected.add(attribute.name)
            if attribute.nested is not None:
                collected.update(attribute.nested.names())
        return collected

    def walk(self, *, recursive: bool = True) -> Iterator[AttributeRecord]:
        for attribute in self.attributes:
            yield attribute
            if recursive and attribute.nested is not None:
                yield from attribute.nested.walk(recursive=True)

    def get(self, name: str) -> Optional[AttributeRecord]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


@dataclass(frozen=True)
class ConstructorSchema:
    """The schema recovered from one ``*schema.Resource`` constructor."""

    function: str
    line: int
    schema: AttributeSchema


@dataclass(frozen=True)
class Violation:
    """A substantive rule or documentation failure with provenance."""

    path: Path
    line: int
    message: str
    rule: str = ""


@dataclass
class AuditSummary:
    """Outcome of a complete audit run."""

    files_checked: int = 0
    violations: List[Violation] = field(default_factory=list)
    unmatched_entries: List[CatalogEntry] = field(default_factory=list)

    def by_rule(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for violation in self.violations:
            counts[violation.rule] = counts.get(violation.rule, 0) + 1
        return counts
