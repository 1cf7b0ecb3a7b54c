"""Rule set loader: parse rules.yml into a RuleSet and report suspicious references."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

import yaml

from capcheck.errors import RuleConfigError
from capcheck.rules.model import CapabilityRule, ConditionalDependency, FieldRule, RuleSet

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SUPPORTED_SCHEMA_VERSIONS: frozenset[int] = frozenset({1})

# Rule sets exported from the application config may stay nested under its prefix.
CONFIG_PREFIX = "app-access-application"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


# ---------------------------------------------------------------------------
# YAML parsing
# ---------------------------------------------------------------------------


def _normalize_key(key: object) -> str:
    """Map ``field-rules``, ``fieldRules`` and ``field_rules`` to ``field_rules``."""
    text = str(key).replace("-", "_")
    return _CAMEL_BOUNDARY.sub("_", text).lower()


def _normalize_keys(data: dict[object, object]) -> dict[str, object]:
    return {_normalize_key(k): v for k, v in data.items()}


def _parse_str_list(raw: object, context: str) -> tuple[str, ...]:
    """Parse an optional list of non-empty strings."""
    if raw is None:
        return ()
    if not isinstance(raw, list):
        msg = f"{context} must be a list"
        raise RuleConfigError(msg)
    items: list[str] = []
    for item in raw:
        if item is None or not str(item).strip():
            msg = f"{context} must not contain empty entries"
            raise RuleConfigError(msg)
        items.append(str(item))
    return tuple(items)


def _parse_conditional_dependency(data: object, context: str) -> ConditionalDependency:
    if not isinstance(data, dict):
        msg = f"{context} must be a mapping"
        raise RuleConfigError(msg)
    fields = _normalize_keys(data)

    condition_field = fields.get("condition_field")
    if condition_field is None or not str(condition_field).strip():
        msg = f"{context} missing required 'condition_field'"
        raise RuleConfigError(msg)

    required = _parse_str_list(
        fields.get("required_capabilities"), f"{context}.required_capabilities"
    )
    if not required:
        msg = f"{context}.required_capabilities must list at least one capability"
        raise RuleConfigError(msg)

    return ConditionalDependency(
        condition_field=str(condition_field),
        expected_value=fields.get("expected_value"),
        required_capabilities=required,
    )


def _parse_field_rule(data: object, context: str) -> FieldRule:
    if not isinstance(data, dict):
        msg = f"{context} must be a mapping"
        raise RuleConfigError(msg)
    fields = _normalize_keys(data)

    condition_raw = fields.get("condition_field")
    condition_field = str(condition_raw) if condition_raw is not None else None

    return FieldRule(
        required_fields=_parse_str_list(
            fields.get("required_fields"), f"{context}.required_fields"
        ),
        condition_field=condition_field or None,
        expected_value=fields.get("expected_value"),
    )


def _parse_capability(data: object, idx: int) -> CapabilityRule:
    if not isinstance(data, dict):
        msg = f"rules.yml: capability at index {idx} must be a mapping"
        raise RuleConfigError(msg)
    fields = _normalize_keys(data)

    cap_type = fields.get("type")
    if cap_type is None or not isinstance(cap_type, str) or not cap_type.strip():
        msg = f"rules.yml: capability at index {idx} missing required 'type' field"
        raise RuleConfigError(msg)
    context = f"Capability '{cap_type}'"

    conditional_raw = fields.get("conditional_dependencies") or []
    if not isinstance(conditional_raw, list):
        msg = f"{context}: conditional_dependencies must be a list"
        raise RuleConfigError(msg)

    field_rules_raw = fields.get("field_rules") or []
    if not isinstance(field_rules_raw, list):
        msg = f"{context}: field_rules must be a list"
        raise RuleConfigError(msg)

    validator_raw = fields.get("custom_validator")
    custom_validator: str | None = None
    if validator_raw is not None:
        if not isinstance(validator_raw, str) or not validator_raw.strip():
            msg = f"{context}: custom_validator must be a non-empty string"
            raise RuleConfigError(msg)
        custom_validator = validator_raw.strip()

    return CapabilityRule(
        type=cap_type,
        dependencies=_parse_str_list(fields.get("dependencies"), f"{context}: dependencies"),
        conditional_dependencies=tuple(
            _parse_conditional_dependency(item, f"{context}: conditional_dependencies[{i}]")
            for i, item in enumerate(conditional_raw)
        ),
        field_rules=tuple(
            _parse_field_rule(item, f"{context}: field_rules[{i}]")
            for i, item in enumerate(field_rules_raw)
        ),
        custom_validator=custom_validator,
    )


def parse_rules(data: object) -> RuleSet:
    """Build a RuleSet from an already-decoded rules document.

    Raises :class:`RuleConfigError` on schema errors (missing version,
    duplicate types, malformed entries).
    """
    if not isinstance(data, dict):
        msg = "rules.yml must be a YAML mapping"
        raise RuleConfigError(msg)

    # Accept documents still nested under the application config prefix.
    if CONFIG_PREFIX in data and isinstance(data[CONFIG_PREFIX], dict):
        data = data[CONFIG_PREFIX]

    version = data.get("version")
    if version is None:
        msg = "rules.yml: missing required 'version' field"
        raise RuleConfigError(msg)
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        expected = sorted(SUPPORTED_SCHEMA_VERSIONS)
        msg = f"rules.yml: unsupported version {version}, expected one of {expected}"
        raise RuleConfigError(msg)

    capabilities_data = data.get("capabilities", [])
    if not isinstance(capabilities_data, list):
        msg = "rules.yml: 'capabilities' must be a list"
        raise RuleConfigError(msg)

    return RuleSet(_parse_capability(item, idx) for idx, item in enumerate(capabilities_data))


def load_rules(rules_path: Path) -> RuleSet:
    """Parse rules.yml and return the validated RuleSet."""
    try:
        with rules_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        msg = f"rules.yml: invalid YAML: {exc}"
        raise RuleConfigError(msg) from exc

    rules = parse_rules(data)
    logger.debug("Loaded %d capability rules from %s", len(rules), rules_path)
    return rules


# ---------------------------------------------------------------------------
# Reference checks (warnings, not errors)
# ---------------------------------------------------------------------------


def check_rule_targets(rules: RuleSet) -> list[str]:
    """Return warnings for dependency targets that are not known capability types.

    Such targets are still enforced during validation, so any request that
    triggers them can never pass.
    """
    warnings: list[str] = []
    for rule in rules:
        for dep in rule.dependencies:
            if dep not in rules:
                warnings.append(
                    f"Capability '{rule.type}' depends on unknown capability '{dep}'"
                )
        for cond in rule.conditional_dependencies:
            for dep in cond.required_capabilities:
                if dep not in rules:
                    warnings.append(
                        f"Capability '{rule.type}' conditionally requires unknown "
                        f"capability '{dep}' (when {cond.condition_field}="
                        f"{cond.expected_value!r})"
                    )
    return warnings
