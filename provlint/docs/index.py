"""Kind-partitioned index of classified documentation."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from ..logging import get_logger
from ..models import ClassifiedDoc, DocFragment, EntityKind
from .classifier import ClassificationError, Classifier

_LOGGER = get_logger("docs")


class DocumentationIndex:
    """Maps canonical names to documentation, one map per entity kind."""

    def __init__(self) -> None:
        self._docs: Dict[EntityKind, Dict[str, ClassifiedDoc]] = {
            kind: {} for kind in EntityKind
        }

    @classmethod
    def build(
        cls,
        fragments: Iterable[DocFragment],
        classifier: Classifier,
        *,
        verbose: bool = False,
    ) -> "DocumentationIndex":
        index = cls()
        for fragment in fragments:
            try:
                doc = classifier.classify(fragment)
            except ClassificationError as exc:
                if verbose:
                    _LOGGER.debug("Ignoring %s due to %s", fragment.path, exc)
                continue
            index.add(doc, verbose=verbose)
        if verbose:
            for kind in EntityKind:
                for name, doc in sorted(index._docs[kind].items()):
                    _LOGGER.debug("docs of %s %s: %d bytes", kind, name, len(doc.content))
        return index

    def add(self, doc: ClassifiedDoc, *, verbose: bool = False) -> None:
        bucket = self._docs[doc.kind]
        previous = bucket.get(doc.canonical_name)
        if previous is not None and verbose:
            _LOGGER.debug(
                "%s replaces %s as documentation of %s",
                doc.path,
                previous.path,
                doc.canonical_name,
            )
        bucket[doc.canonical_name] = doc

    def get(self, kind: EntityKind, name: str) -> Optional[ClassifiedDoc]:
        return self._docs[kind].get(name)

    def names(self, kind: EntityKind) -> Dict[str, ClassifiedDoc]:
        return dict(self._docs[kind])

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._docs.values())


__all__ = ["DocumentationIndex"]
