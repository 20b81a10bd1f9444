"""Rule implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Sequence, Set

from ..config import AuditConfig
from .base import Rule
from .builtin import DanglingConflictRule, MissingDescriptionRule, ReservedNameRule
from .engine import RuleEngine

_ENTRY_POINT_GROUP = "provlint.rules"

_BUILTIN_FACTORIES: dict[str, Callable[[AuditConfig], Rule]] = {
    MissingDescriptionRule.name: lambda config: MissingDescriptionRule(
        config.conventions.description_field
    ),
    ReservedNameRule.name: lambda config: ReservedNameRule(config.rules.reserved_names),
    DanglingConflictRule.name: lambda config: DanglingConflictRule(),
}


def discover_rules(config: AuditConfig, enabled: Sequence[str] | None = None) -> List[Rule]:
    """Return instantiated rules, honoring optional enabled names."""

    if enabled is None and config.rules.enabled:
        enabled = config.rules.enabled
    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    rules: List[Rule] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Rule]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, Rule):
            raise TypeError(f"Rule factory for '{name}' did not return a Rule instance")
        rules.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, builtin in _BUILTIN_FACTORIES.items():
        _add(name, lambda builtin=builtin: builtin(config))

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to load rule entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> Rule:
            return _coerce_rule(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown rules requested: {missing}")

    return rules


def _coerce_rule(obj: object) -> Rule:
    if isinstance(obj, Rule):
        return obj
    if isinstance(obj, type) and issubclass(obj, Rule):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Rule):
            return instance
    raise TypeError("Rule entry point must be a Rule subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "DanglingConflictRule",
    "MissingDescriptionRule",
    "ReservedNameRule",
    "Rule",
    "RuleEngine",
    "discover_rules",
]
