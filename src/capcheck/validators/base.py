"""Contract for pluggable, code-level validators of a capability's configuration block."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CustomFieldValidator(Protocol):
    """Validator for rules the declarative field-rule language cannot express.

    Implementations are stateless and shared between requests.  They signal
    failure by raising a :class:`capcheck.errors.ValidationError` subclass
    and return ``None`` on success.
    """

    def validate(self, capability_type: str, config_data: dict[str, Any] | None) -> None:
        """Validate *config_data*, the configuration block of *capability_type*.

        Args:
            capability_type: Capability the block belongs to, for error messages.
            config_data: The block itself, or ``None`` when none was submitted.

        Raises:
            ValidationError: If the block violates the validator's rules.
        """
        ...
