"""Dependency resolver: static and conditional capability prerequisites."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from capcheck.errors import MalformedConfigurationBlock, MissingDependency, UnknownCapabilityType
from capcheck.values import values_equal

if TYPE_CHECKING:
    from collections.abc import Iterable

    from capcheck.rules.model import CapabilityRule, RuleSet

logger = logging.getLogger(__name__)


def unique_in_order(items: Iterable[str]) -> list[str]:
    """Collapse duplicates while keeping first-occurrence order."""
    return list(dict.fromkeys(items))


def config_block(
    config_data: Mapping[str, object] | None, capability_type: str
) -> Mapping[str, object] | None:
    """Return the configuration block of *capability_type*, or ``None`` if absent.

    Raises:
        MalformedConfigurationBlock: If the block is present but not a mapping.
    """
    if not config_data:
        return None
    block = config_data.get(capability_type)
    if block is None:
        return None
    if not isinstance(block, Mapping):
        raise MalformedConfigurationBlock(capability_type)
    return block


def _triggered_dependencies(
    rule: CapabilityRule, config_data: Mapping[str, object] | None
) -> list[str]:
    """Return capabilities required by the conditional dependencies that fire for *rule*."""
    if not rule.conditional_dependencies:
        return []

    block = config_block(config_data, rule.type) or {}
    triggered: list[str] = []
    for cond in rule.conditional_dependencies:
        if values_equal(block.get(cond.condition_field), cond.expected_value):
            logger.debug(
                "%s: %s=%r triggers %s",
                rule.type,
                cond.condition_field,
                cond.expected_value,
                list(cond.required_capabilities),
            )
            triggered.extend(cond.required_capabilities)
    return triggered


def resolve_dependencies(
    selected: Iterable[str],
    config_data: Mapping[str, object] | None,
    rules: RuleSet,
) -> list[str]:
    """Check that every capability required by the selection is itself selected.

    Walks the selection in the order supplied: each capability must be
    known to *rules*; its static dependencies and any conditional
    dependencies triggered by its own config block are collected into the
    required set.  Dependency targets are enforced whether or not they are
    known types.

    Returns the required capabilities in discovery order.

    Raises:
        UnknownCapabilityType: For the first selected capability without a rule.
        MissingDependency: For the first required capability not selected.
        MalformedConfigurationBlock: If a block consulted for a condition is
            not a mapping.
    """
    selection = unique_in_order(selected)

    selected_rules: list[CapabilityRule] = []
    for cap in selection:
        rule = rules.get(cap)
        if rule is None:
            raise UnknownCapabilityType(cap)
        selected_rules.append(rule)

    required: list[str] = []
    for rule in selected_rules:
        required.extend(rule.dependencies)
    for rule in selected_rules:
        required.extend(_triggered_dependencies(rule, config_data))
    required = unique_in_order(required)

    chosen = set(selection)
    for cap in required:
        if cap not in chosen:
            raise MissingDependency(cap, selection)

    logger.debug("Dependencies satisfied for %s (required: %s)", selection, required)
    return required
