"""Exception hierarchy for rule-set configuration faults and request validation failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class CapcheckError(Exception):
    """Base class for every error raised by capcheck."""


class RuleConfigError(CapcheckError):
    """Raised when the rule set or the validator registry is misconfigured.

    These are startup faults: they are detected while loading rules or
    wiring validators, never while validating a request.
    """


# ---------------------------------------------------------------------------
# Request validation failures
# ---------------------------------------------------------------------------


class ValidationError(CapcheckError):
    """A submitted application violates the rule set.

    The ``message`` is surfaced verbatim to the caller.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NoCapabilitiesSelected(ValidationError):
    """The application selects no capability at all."""

    def __init__(self) -> None:
        super().__init__("At least one capability must be selected")


class UnknownCapabilityType(ValidationError):
    """A selected capability has no rule in the rule set."""

    def __init__(self, capability_type: str) -> None:
        super().__init__(f"Unsupported capability [{capability_type}]")
        self.capability_type = capability_type


class MissingDependency(ValidationError):
    """A static or conditional dependency is required but not selected."""

    def __init__(self, required: str, selected: Sequence[str]) -> None:
        super().__init__(
            f"Capabilities [{', '.join(selected)}] require capability [{required}], "
            f"but it is not selected"
        )
        self.required = required
        self.selected = tuple(selected)


class MissingConfigurationBlock(ValidationError):
    """A capability with field rules was submitted without configuration data."""

    def __init__(self, capability_type: str) -> None:
        super().__init__(f"Capability [{capability_type}] is missing configuration data")
        self.capability_type = capability_type


class MalformedConfigurationBlock(ValidationError):
    """A capability's configuration data is present but is not a mapping."""

    def __init__(self, capability_type: str) -> None:
        super().__init__(f"Capability [{capability_type}] configuration data is malformed")
        self.capability_type = capability_type


class MissingOrBlankField(ValidationError):
    """A field demanded by a field rule is absent or blank."""

    def __init__(
        self, capability_type: str, field: str, *, condition_field: str | None = None
    ) -> None:
        if condition_field:
            message = (
                f"Capability [{capability_type}] enables [{condition_field}], "
                f"field [{field}] is required"
            )
        else:
            message = f"Capability [{capability_type}] field [{field}] is required"
        super().__init__(message)
        self.capability_type = capability_type
        self.field = field
        self.condition_field = condition_field


class InvalidFieldValue(ValidationError):
    """A configuration value has the wrong shape, format, or range."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path} {message}")
        self.path = path


class DuplicateServiceCode(ValidationError):
    """A service code appears more than once within one service list."""

    def __init__(self, path: str, code: str) -> None:
        super().__init__(f"{path} is duplicated: '{code}'")
        self.path = path
        self.code = code
