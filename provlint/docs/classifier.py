"""Classification of documentation fragments by front matter.

A fragment is tied to a catalog entry through its ``sidebar_current`` front
matter value, e.g. ``docs-acme-datasource-region`` for the ``acme_region``
datasource. Classification runs two ordered rule lists over that value:

* prefix rules strip conventional leading segments (``docs-``, ``acme-``);
* kind rules decide the entity kind from keywords in the value or hints in
  the file path, and strip the kind infix.

Both lists can be extended by passing custom rules to :class:`Classifier`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import ClassifiedDoc, DocFragment, EntityKind


class ClassificationError(ValueError):
    """Raised when a fragment cannot be tied to a kind and name."""


@dataclass(frozen=True)
class PrefixRule:
    """Strips ``prefix`` from the start of the marker value when present.

    ``{provider}`` in the prefix is replaced by the provider name.
    """

    prefix: str

    def apply(self, value: str, provider: str) -> str:
        prefix = self.prefix.format(provider=provider)
        if prefix and value.startswith(prefix):
            return value[len(prefix) :]
        return value


@dataclass(frozen=True)
class KindRule:
    """Assigns ``kind`` when a keyword or path hint matches."""

    kind: EntityKind
    keywords: Tuple[str, ...]
    path_hints: Tuple[str, ...] = ()
    infixes: Tuple[str, ...] = ()

    def matches(self, value: str, path: str) -> bool:
        return any(word in value for word in self.keywords) or any(
            hint in path for hint in self.path_hints
        )

    def strip(self, value: str) -> str:
        """Drop everything up to and including the last occurrence of an infix."""
        cut = -1
        for infix in self.infixes:
            index = value.rfind(infix)
            if index >= 0:
                cut = max(cut, index + len(infix))
        return value[cut:] if cut >= 0 else value


DEFAULT_PREFIX_RULES: Tuple[PrefixRule, ...] = (
    PrefixRule("docs-"),
    PrefixRule("{provider}-"),
)

DEFAULT_KIND_RULES: Tuple[KindRule, ...] = (
    KindRule(
        kind=EntityKind.DATASOURCE,
        keywords=("datasource", "data-source"),
        path_hints=("/d/", "data_source"),
        infixes=("datasource-", "data-source-"),
    ),
    KindRule(
        kind=EntityKind.RESOURCE,
        keywords=("resource",),
        path_hints=("/r/",),
        infixes=("resource-",),
    ),
)

_COMPOSE_SEGMENT = {
    EntityKind.DATASOURCE: "datasource",
    EntityKind.RESOURCE: "resource",
}


class Classifier:
    """Derives the kind and canonical name of documentation fragments."""

    def __init__(
        self,
        provider_name: str,
        *,
        marker: str = "sidebar_current",
        prefix_rules: Sequence[PrefixRule] = DEFAULT_PREFIX_RULES,
        kind_rules: Sequence[KindRule] = DEFAULT_KIND_RULES,
    ) -> None:
        self.provider_name = provider_name
        self.marker = marker
        self.prefix_rules: List[PrefixRule] = list(prefix_rules)
        self.kind_rules: List[KindRule] = list(kind_rules)

    def classify(self, fragment: DocFragment) -> ClassifiedDoc:
        path = "/" + Path(fragment.path).as_posix().lstrip("/")
        for value in self._marker_values(fragment.content):
            for rule in self.prefix_rules:
                value = rule.apply(value, self.provider_name)
            for kind_rule in self.kind_rules:
                if not kind_rule.matches(value, path):
                    continue
                suffix = kind_rule.strip(value)
                if not suffix:
                    raise ClassificationError(f"empty {kind_rule.kind} name in {self.marker}")
                return ClassifiedDoc(
                    canonical_name=self.canonical_name(suffix),
                    kind=kind_rule.kind,
                    content=fragment.content,
                    path=fragment.path,
                )
        raise ClassificationError(f"could not find a classifiable {self.marker}")

    def canonical_name(self, suffix: str) -> str:
        normalized = suffix.replace(" ", "_").replace("-", "_")
        return f"{self.provider_name}_{normalized}"

    def split(self, canonical_name: str) -> Optional[str]:
        """Return the suffix of ``canonical_name`` or ``None`` for another provider."""
        prefix = f"{self.provider_name}_"
        if not canonical_name.startswith(prefix):
            return None
        return canonical_name[len(prefix) :]

    def compose(self, kind: EntityKind, suffix: str) -> str:
        """Render the conventional marker value documenting ``kind`` ``suffix``."""
        slug = suffix.replace("_", "-")
        return f"docs-{self.provider_name}-{_COMPOSE_SEGMENT[kind]}-{slug}"

    def _marker_values(self, content: bytes) -> Iterable[str]:
        for raw in content.decode("utf-8", errors="replace").splitlines():
            if self.marker not in raw:
                continue
            _, sep, value = raw.partition(": ")
            if not sep:
                continue
            value = value.strip().strip("\"'")
            if value:
                yield value


__all__ = [
    "ClassificationError",
    "Classifier",
    "DEFAULT_KIND_RULES",
    "DEFAULT_PREFIX_RULES",
    "KindRule",
    "PrefixRule",
]
