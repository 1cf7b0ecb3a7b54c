"""Field rule evaluator: declarative required-field rules plus custom validators."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from capcheck.errors import (
    MalformedConfigurationBlock,
    MissingConfigurationBlock,
    MissingOrBlankField,
)
from capcheck.values import is_non_blank, values_equal

if TYPE_CHECKING:
    from capcheck.rules.model import CapabilityRule, FieldRule
    from capcheck.validators.registry import ValidatorRegistry

logger = logging.getLogger(__name__)


def _check_field_rule(capability_type: str, block: Mapping[str, Any], rule: FieldRule) -> None:
    if rule.condition_field:
        if not values_equal(block.get(rule.condition_field), rule.expected_value):
            return
    for field in rule.required_fields:
        if not is_non_blank(block.get(field)):
            raise MissingOrBlankField(
                capability_type, field, condition_field=rule.condition_field
            )


class FieldRuleEvaluator:
    """Applies a capability's field rules and custom validator to its config block.

    The registry is injected once and only read afterwards.  When a rule
    names a custom validator it runs before the declared field rules; both
    must pass.
    """

    def __init__(self, registry: ValidatorRegistry) -> None:
        self._registry = registry

    def evaluate(
        self, capability_type: str, config_block: Mapping[str, Any], rule: CapabilityRule
    ) -> None:
        """Validate *config_block* against *rule*.

        Raises:
            MissingOrBlankField: If a triggered field rule is not satisfied.
            ValidationError: Whatever the custom validator raises.
        """
        if rule.custom_validator:
            validator = self._registry.get(rule.custom_validator)
            logger.debug("%s: custom validator %s", capability_type, rule.custom_validator)
            validator.validate(capability_type, dict(config_block))

        for field_rule in rule.field_rules:
            _check_field_rule(capability_type, config_block, field_rule)

    def evaluate_block(
        self, capability_type: str, raw_block: object, rule: CapabilityRule
    ) -> None:
        """Validate a possibly absent or malformed configuration block.

        A capability with field rules must submit a block.  Without field
        rules an absent block is still handed to the custom validator (as an
        empty mapping) so that it can enforce its own minimum content.
        """
        if raw_block is None:
            if rule.field_rules:
                raise MissingConfigurationBlock(capability_type)
            if rule.custom_validator:
                self.evaluate(capability_type, {}, rule)
            return

        if not isinstance(raw_block, Mapping):
            raise MalformedConfigurationBlock(capability_type)

        self.evaluate(capability_type, raw_block, rule)
