"""Base classes for attribute rules."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import AttributeRecord, AttributeSchema


class Rule(ABC):
    """Contract for checks evaluated against each schema attribute."""

    name: str = "rule"
    recursive: bool = False

    @abstractmethod
    def check(self, attribute: AttributeRecord, schema: AttributeSchema) -> Optional[str]:
        """Return a failure message, or None when ``attribute`` passes.

        ``schema`` is the complete schema of the enclosing constructor.
        """
