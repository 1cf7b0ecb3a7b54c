"""Capability rule model: static and conditional dependencies, field rules, validator refs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from capcheck.errors import RuleConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@dataclass(frozen=True)
class ConditionalDependency:
    """Capabilities required when a field of the owner's config block has a given value."""

    condition_field: str
    expected_value: object
    required_capabilities: tuple[str, ...] = ()


@dataclass(frozen=True)
class FieldRule:
    """Fields that must be non-blank, optionally only when another field matches a value."""

    required_fields: tuple[str, ...] = ()
    condition_field: str | None = None
    expected_value: object = None

    @property
    def is_conditional(self) -> bool:
        return bool(self.condition_field)


@dataclass(frozen=True)
class CapabilityRule:
    """Everything the rule set declares about one capability type."""

    type: str
    dependencies: tuple[str, ...] = ()
    conditional_dependencies: tuple[ConditionalDependency, ...] = ()
    field_rules: tuple[FieldRule, ...] = ()
    custom_validator: str | None = None


class RuleSet:
    """Immutable lookup of :class:`CapabilityRule` by type, in declaration order.

    Built once at startup and shared read-only between validation calls.
    """

    def __init__(self, rules: Iterable[CapabilityRule] = ()) -> None:
        by_type: dict[str, CapabilityRule] = {}
        for rule in rules:
            if rule.type in by_type:
                msg = f"Duplicate capability type '{rule.type}'"
                raise RuleConfigError(msg)
            by_type[rule.type] = rule
        self._by_type = by_type

    def get(self, capability_type: str) -> CapabilityRule | None:
        return self._by_type.get(capability_type)

    def __contains__(self, capability_type: object) -> bool:
        return capability_type in self._by_type

    def __iter__(self) -> Iterator[CapabilityRule]:
        return iter(self._by_type.values())

    def __len__(self) -> int:
        return len(self._by_type)

    def __repr__(self) -> str:
        return f"RuleSet({list(self._by_type)!r})"

    @property
    def types(self) -> tuple[str, ...]:
        return tuple(self._by_type)

    def validator_names(self) -> list[str]:
        """Return the distinct custom validator names referenced by the rules."""
        names: list[str] = []
        for rule in self:
            if rule.custom_validator and rule.custom_validator not in names:
                names.append(rule.custom_validator)
        return names
