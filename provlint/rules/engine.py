"""Evaluation of rules over constructor schemas."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from ..models import AttributeSchema, ConstructorSchema, Violation
from .base import Rule


class RuleEngine:
    """Runs every rule against every attribute of a constructor schema.

    Rules marked ``recursive`` also see attributes of nested schemas. Each
    rule is evaluated independently, so one failure never hides another.
    Attributes with opaque definitions are not checked.
    """

    def __init__(self, rules: Sequence[Rule]) -> None:
        self.rules = list(rules)

    def evaluate(self, constructor: ConstructorSchema, path: Path) -> List[Violation]:
        violations: List[Violation] = []
        self._evaluate(constructor.schema, constructor.schema, path, violations, depth=0)
        return violations

    def _evaluate(
        self,
        current: AttributeSchema,
        enclosing: AttributeSchema,
        path: Path,
        violations: List[Violation],
        *,
        depth: int,
    ) -> None:
        for attribute in current.attributes:
            if not attribute.is_opaque:
                for rule in self.rules:
                    if depth > 0 and not rule.recursive:
                        continue
                    message = rule.check(attribute, enclosing)
                    if message is not None:
                        violations.append(
                            Violation(path=path, line=attribute.line, message=message, rule=rule.name)
                        )
            if attribute.nested is not None:
                self._evaluate(attribute.nested, enclosing, path, violations, depth=depth + 1)


__all__ = ["RuleEngine"]
