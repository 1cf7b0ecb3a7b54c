"""Application validation service: request model, two-phase validation, and result."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from capcheck.engine.evaluator import FieldRuleEvaluator
from capcheck.engine.resolver import resolve_dependencies, unique_in_order
from capcheck.errors import NoCapabilitiesSelected, ValidationError
from capcheck.rules.loader import check_rule_targets
from capcheck.validators.registry import default_registry, ensure_validators_registered

if TYPE_CHECKING:
    from capcheck.rules.model import RuleSet
    from capcheck.validators.registry import ValidatorRegistry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ApplicationRequest:
    """One submitted application.

    ``system_code``, ``dept`` and ``applicant`` identify the applicant and
    are carried through untouched; validation only reads ``capabilities``
    and ``config_data``.
    """

    capabilities: tuple[str, ...] = ()
    config_data: Mapping[str, Any] = field(default_factory=dict)
    system_code: str | None = None
    dept: str | None = None
    applicant: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ApplicationRequest:
        """Build a request from a decoded JSON/YAML body.

        Accepts camelCase (``configData``, ``systemCode``) or snake_case keys.

        Raises:
            ValidationError: If the body does not have the expected shape.
        """
        if not isinstance(data, Mapping):
            msg = "Application body must be an object"
            raise ValidationError(msg)

        caps_raw = data.get("capabilities")
        if caps_raw is None:
            capabilities: tuple[str, ...] = ()
        elif isinstance(caps_raw, list):
            if not all(isinstance(c, str) for c in caps_raw):
                msg = "capabilities must be a list of strings"
                raise ValidationError(msg)
            capabilities = tuple(caps_raw)
        else:
            msg = "capabilities must be a list"
            raise ValidationError(msg)

        config_raw = data.get("configData", data.get("config_data"))
        if config_raw is None:
            config_data: Mapping[str, Any] = {}
        elif isinstance(config_raw, Mapping):
            config_data = config_raw
        else:
            msg = "configData must be an object"
            raise ValidationError(msg)

        return cls(
            capabilities=capabilities,
            config_data=config_data,
            system_code=_opt_str(data.get("systemCode", data.get("system_code"))),
            dept=_opt_str(data.get("dept")),
            applicant=_opt_str(data.get("applicant")),
        )


def _opt_str(value: object) -> str | None:
    return str(value) if value is not None else None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation: success, or the first violation's message."""

    ok: bool
    message: str | None = None

    def as_dict(self) -> dict[str, object]:
        return {"ok": self.ok, "message": self.message}


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CapabilityValidator:
    """Validates applications against a rule set.

    Construction is the startup step: the rule set's custom validator names
    are resolved against *registry* (defaulting to :func:`default_registry`)
    and unknown dependency targets are logged.  Afterwards the instance
    holds only read-only state and may serve concurrent callers.

    Raises:
        RuleConfigError: If a rule names an unregistered custom validator.
    """

    def __init__(self, rules: RuleSet, registry: ValidatorRegistry | None = None) -> None:
        if registry is None:
            registry = default_registry()
        ensure_validators_registered(rules, registry)
        for warning in check_rule_targets(rules):
            logger.warning(warning)

        self.rules = rules
        self.registry = registry
        self._evaluator = FieldRuleEvaluator(registry)

    def validate(self, request: ApplicationRequest) -> None:
        """Run both validation phases, raising on the first violation.

        Raises:
            NoCapabilitiesSelected: If the selection is empty.
            ValidationError: Any dependency or field violation.
        """
        selection = unique_in_order(request.capabilities or ())
        if not selection:
            raise NoCapabilitiesSelected()

        config_data = request.config_data or {}

        # Phase 1: capability dependencies.
        resolve_dependencies(selection, config_data, self.rules)

        # Phase 2: field rules per selected capability.
        for cap in selection:
            rule = self.rules.get(cap)
            assert rule is not None  # resolve_dependencies rejected unknown types
            self._evaluator.evaluate_block(cap, config_data.get(cap), rule)

        logger.debug("Application accepted: %s", selection)

    def check(self, request: ApplicationRequest) -> ValidationResult:
        """Validate *request* and report the outcome instead of raising."""
        try:
            self.validate(request)
        except ValidationError as exc:
            logger.info("Application rejected: %s", exc.message)
            return ValidationResult(ok=False, message=exc.message)
        return ValidationResult(ok=True)
