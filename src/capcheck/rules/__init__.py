"""Rules domain — capability rule model and YAML loader."""

from capcheck.rules.loader import check_rule_targets, load_rules, parse_rules
from capcheck.rules.model import CapabilityRule, ConditionalDependency, FieldRule, RuleSet

__all__ = [
    "CapabilityRule",
    "ConditionalDependency",
    "FieldRule",
    "RuleSet",
    "check_rule_targets",
    "load_rules",
    "parse_rules",
]
