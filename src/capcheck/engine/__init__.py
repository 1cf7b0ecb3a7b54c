"""Engine domain — dependency resolution and field rule evaluation."""

from capcheck.engine.evaluator import FieldRuleEvaluator
from capcheck.engine.resolver import config_block, resolve_dependencies, unique_in_order

__all__ = [
    "FieldRuleEvaluator",
    "config_block",
    "resolve_dependencies",
    "unique_in_order",
]
