"""Validators domain — custom validator contract, registry, and built-in validators."""

from capcheck.validators.base import CustomFieldValidator
from capcheck.validators.gateway import GatewayServiceValidator
from capcheck.validators.registry import (
    ENTRY_POINT_GROUP,
    ValidatorRegistry,
    default_registry,
    ensure_validators_registered,
    load_entry_point_validators,
)

__all__ = [
    "ENTRY_POINT_GROUP",
    "CustomFieldValidator",
    "GatewayServiceValidator",
    "ValidatorRegistry",
    "default_registry",
    "ensure_validators_registered",
    "load_entry_point_validators",
]
