"""Documentation classification and indexing."""

from .classifier import (
    DEFAULT_KIND_RULES,
    DEFAULT_PREFIX_RULES,
    ClassificationError,
    Classifier,
    KindRule,
    PrefixRule,
)
from .index import DocumentationIndex

__all__ = [
    "ClassificationError",
    "Classifier",
    "DEFAULT_KIND_RULES",
    "DEFAULT_PREFIX_RULES",
    "DocumentationIndex",
    "KindRule",
    "PrefixRule",
]
