"""Cross-referencing of catalog entries with their documentation."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .docs import Classifier, DocumentationIndex
from .models import CatalogEntry, ConstructorSchema, Violation

DOC_NOT_FOUND = "doc-not-found"
MISSING_IN_DOCS = "missing-in-docs"


class CrossReferenceChecker:
    """Verifies that documentation exists and mentions every top-level attribute.

    The markup check is an exact, whitespace-sensitive byte search for the
    rendered ``markup`` template (by default the name in backticks).
    """

    def __init__(
        self,
        index: DocumentationIndex,
        classifier: Classifier,
        *,
        markup: str = "`{name}`",
    ) -> None:
        self.index = index
        self.classifier = classifier
        self.markup = markup

    def expected_markup(self, attribute: str) -> bytes:
        return self.markup.format(name=attribute).encode("utf-8")

    def check(
        self,
        entry: CatalogEntry,
        constructor: Optional[ConstructorSchema],
        path: Path,
        line: int,
    ) -> List[Violation]:
        doc = self.index.get(entry.kind, entry.declared_name)
        if doc is None:
            return [
                Violation(
                    path=path,
                    line=line,
                    message=self._not_found_message(entry),
                    rule=DOC_NOT_FOUND,
                )
            ]
        if constructor is None:
            return []

        violations: List[Violation] = []
        for attribute in constructor.schema.attributes:
            markup = self.expected_markup(attribute.name)
            if markup in doc.content:
                continue
            violations.append(
                Violation(
                    path=path,
                    line=attribute.line,
                    message=(
                        f'Missing "{markup.decode("utf-8")}" in docs of "{entry.declared_name}"'
                    ),
                    rule=MISSING_IN_DOCS,
                )
            )
        return violations

    def _not_found_message(self, entry: CatalogEntry) -> str:
        message = f'Documentation of {entry.kind} "{entry.declared_name}" not found'
        suffix = self.classifier.split(entry.declared_name)
        if suffix is None:
            return message
        expected = self.classifier.compose(entry.kind, suffix)
        return f'{message} (expected {self.classifier.marker}: "{expected}")'


__all__ = ["CrossReferenceChecker", "DOC_NOT_FOUND", "MISSING_IN_DOCS"]
