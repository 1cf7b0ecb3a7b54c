"""Result formatters for the CLI: human-readable, JSON, and porcelain output."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from capcheck.service import ValidationResult


def format_rich(result: ValidationResult, capabilities: Sequence[str] = ()) -> str:
    """Format a ValidationResult as human-readable text.

    Example output::

        Capabilities: gateway, registry
        ✗ Capabilities [gateway] require capability [registry], but it is not selected
    """
    lines: list[str] = []
    if capabilities:
        lines.append(f"Capabilities: {', '.join(capabilities)}")
    if result.ok:
        lines.append("✓ Application accepted")
    else:
        lines.append(f"✗ {result.message}")
    return "\n".join(lines)


def format_json(result: ValidationResult, capabilities: Sequence[str] = ()) -> str:
    """Format a ValidationResult as a JSON object with ``ok`` and ``message``."""
    return json.dumps(result.as_dict(), ensure_ascii=False, indent=2)


def format_porcelain(result: ValidationResult, capabilities: Sequence[str] = ()) -> str:
    """Format a ValidationResult as one machine-readable line.

    ``ok`` on success, ``rejected:<message>`` on failure.
    """
    if result.ok:
        return "ok"
    return f"rejected:{result.message}"
