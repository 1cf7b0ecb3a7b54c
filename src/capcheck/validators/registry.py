"""Name → validator registry, populated once at startup."""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from typing import TYPE_CHECKING

from capcheck.errors import RuleConfigError
from capcheck.validators.base import CustomFieldValidator

if TYPE_CHECKING:
    from collections.abc import Iterator

    from capcheck.rules.model import RuleSet

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "capcheck.validators"


class ValidatorRegistry:
    """Maps configured validator names to :class:`CustomFieldValidator` instances.

    Registration happens before the first request; afterwards the registry
    is only read, so it can be shared between threads without locking.
    """

    def __init__(self) -> None:
        self._validators: dict[str, CustomFieldValidator] = {}

    def register(self, name: str, validator: CustomFieldValidator) -> None:
        """Register *validator* under *name*.

        Raises:
            RuleConfigError: If *name* is taken, or *validator* is a class or
                lacks ``validate``.
        """
        if name in self._validators:
            msg = f"Custom validator '{name}' is already registered"
            raise RuleConfigError(msg)
        if isinstance(validator, type):
            msg = f"Custom validator '{name}' is a class; register an instance"
            raise RuleConfigError(msg)
        if not isinstance(validator, CustomFieldValidator):
            msg = f"Custom validator '{name}' does not implement validate()"
            raise RuleConfigError(msg)
        self._validators[name] = validator
        logger.debug("Registered custom validator %s (%s)", name, type(validator).__name__)

    def get(self, name: str) -> CustomFieldValidator:
        """Return the validator registered as *name*.

        Raises:
            RuleConfigError: If no validator is registered under *name*.
        """
        try:
            return self._validators[name]
        except KeyError:
            msg = f"Unknown custom validator '{name}', registered: {self.names()}"
            raise RuleConfigError(msg) from None

    def names(self) -> list[str]:
        return sorted(self._validators)

    def __contains__(self, name: object) -> bool:
        return name in self._validators

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._validators)


def load_entry_point_validators(registry: ValidatorRegistry) -> int:
    """Register validators published under the ``capcheck.validators`` entry-point group.

    An entry point may name either a validator class (instantiated with no
    arguments) or a ready-made instance.  Returns the number registered.
    """
    count = 0
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            target = ep.load()
            validator = target() if isinstance(target, type) else target
        except Exception as exc:
            msg = f"Failed to load custom validator '{ep.name}' from {ep.value}: {exc}"
            raise RuleConfigError(msg) from exc
        registry.register(ep.name, validator)
        count += 1
    return count


def default_registry() -> ValidatorRegistry:
    """Build the registry with the built-in validators plus installed plugins."""
    from capcheck.validators.gateway import GatewayServiceValidator

    registry = ValidatorRegistry()
    registry.register(GatewayServiceValidator.name, GatewayServiceValidator())
    plugins = load_entry_point_validators(registry)
    if plugins:
        logger.info("Loaded %d custom validator plugin(s)", plugins)
    return registry


def ensure_validators_registered(rules: RuleSet, registry: ValidatorRegistry) -> None:
    """Fail fast when a rule names a validator the registry does not know.

    Raises:
        RuleConfigError: Listing every unresolved name and the capabilities using it.
    """
    missing: dict[str, list[str]] = {}
    for rule in rules:
        if rule.custom_validator and rule.custom_validator not in registry:
            missing.setdefault(rule.custom_validator, []).append(rule.type)

    if missing:
        details = "; ".join(
            f"'{name}' (used by {', '.join(types)})" for name, types in missing.items()
        )
        msg = f"Unregistered custom validators: {details}"
        raise RuleConfigError(msg)
