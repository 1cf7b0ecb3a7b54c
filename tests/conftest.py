"""Shared test fixtures for capcheck."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from capcheck.rules.loader import parse_rules
from capcheck.service import CapabilityValidator
from capcheck.validators.registry import default_registry

if TYPE_CHECKING:
    from pathlib import Path

    from capcheck.rules.model import RuleSet
    from capcheck.validators.registry import ValidatorRegistry


RULES_YAML = """\
version: 1
capabilities:
  - type: gateway
    dependencies: [registry]
    custom_validator: gatewayServiceValidator
  - type: registry
    field_rules:
      - required_fields: [address]
  - type: resource
    conditional_dependencies:
      - condition_field: platform
        expected_value: OSS
        required_capabilities: [nacos]
    field_rules:
      - condition_field: platform
        expected_value: OSS
        required_fields: [bucket, region]
  - type: nacos
"""

RULES_DATA: dict[str, object] = {
    "version": 1,
    "capabilities": [
        {
            "type": "gateway",
            "dependencies": ["registry"],
            "custom_validator": "gatewayServiceValidator",
        },
        {
            "type": "registry",
            "field_rules": [{"required_fields": ["address"]}],
        },
        {
            "type": "resource",
            "conditional_dependencies": [
                {
                    "condition_field": "platform",
                    "expected_value": "OSS",
                    "required_capabilities": ["nacos"],
                }
            ],
            "field_rules": [
                {
                    "condition_field": "platform",
                    "expected_value": "OSS",
                    "required_fields": ["bucket", "region"],
                }
            ],
        },
        {"type": "nacos"},
    ],
}


@pytest.fixture()
def rule_set() -> RuleSet:
    """The reference rule set: gateway → registry, resource → nacos when platform=OSS."""
    return parse_rules(RULES_DATA)


@pytest.fixture()
def registry() -> ValidatorRegistry:
    return default_registry()


@pytest.fixture()
def validator(rule_set: RuleSet, registry: ValidatorRegistry) -> CapabilityValidator:
    return CapabilityValidator(rule_set, registry)


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Path:
    """Create a project with ``.capcheck/rules.yml`` holding the reference rules."""
    rules_dir = tmp_path / ".capcheck"
    rules_dir.mkdir(parents=True)
    (rules_dir / "rules.yml").write_text(RULES_YAML, encoding="utf-8")
    return tmp_path
