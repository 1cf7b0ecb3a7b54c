"""Gateway service validator: subscribed/published service lists of a gateway capability."""

from __future__ import annotations

import re
from typing import Any

from capcheck.errors import DuplicateServiceCode, InvalidFieldValue, ValidationError
from capcheck.values import is_non_blank

# http/https, domain or IPv4 host, optional port, optional path
URL_PATTERN = re.compile(
    r"https?://"
    r"(?:"
    r"(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}"
    r"|"
    r"(?:[0-9]{1,3}\.){3}[0-9]{1,3}"
    r")"
    r"(?::[0-9]{1,5})?"
    r"(?:/.*)?"
)

_INTEGER_STRING = re.compile(r"[+-]?[0-9]+")

MIN_TIMEOUT_MS = 1
MAX_TIMEOUT_MS = 30000

# Timeout strings must fit a signed 64-bit integer.
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

SUBSCRIBED_REQUIRED = ("serviceCode", "systemCode", "serviceName")
PUBLISHED_REQUIRED = ("serviceCode", "serviceName", "gatewayUrl", "timeoutMs")


class GatewayServiceValidator:
    """Validates the ``subscribedServices`` and ``publishedServices`` lists.

    At least one list must be non-empty.  Subscribed entries need a code,
    system code and name; published entries additionally need a gateway
    URL and a timeout.  Service codes must be unique within each list.
    """

    name = "gatewayServiceValidator"

    def validate(self, capability_type: str, config_data: dict[str, Any] | None) -> None:
        if config_data is None:
            msg = f"Capability [{capability_type}] is missing configuration data"
            raise ValidationError(msg)

        subscribed = _service_list(config_data, "subscribedServices")
        published = _service_list(config_data, "publishedServices")

        if not subscribed and not published:
            msg = (
                f"Capability [{capability_type}] must configure at least one "
                f"subscribed or published service"
            )
            raise ValidationError(msg)

        subscribed_codes: set[str] = set()
        for i, service in enumerate(subscribed):
            prefix = f"subscribedServices[{i}]"
            entry = _service_entry(service, prefix)
            _require_fields(entry, prefix, SUBSCRIBED_REQUIRED)
            code = _string_value(entry, "serviceCode", prefix)
            _check_duplicate(subscribed_codes, code, f"{prefix}.serviceCode")

        published_codes: set[str] = set()
        for i, service in enumerate(published):
            prefix = f"publishedServices[{i}]"
            entry = _service_entry(service, prefix)
            _require_fields(entry, prefix, PUBLISHED_REQUIRED)
            code = _string_value(entry, "serviceCode", prefix)
            _check_duplicate(published_codes, code, f"{prefix}.serviceCode")

            gateway_url = _string_value(entry, "gatewayUrl", prefix)
            if not URL_PATTERN.fullmatch(gateway_url):
                raise InvalidFieldValue(
                    f"{prefix}.gatewayUrl",
                    "must be a valid HTTP/HTTPS URL (e.g. https://api.example.com/path)",
                )

            _check_timeout(entry.get("timeoutMs"), f"{prefix}.timeoutMs")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _service_list(config_data: dict[str, Any], key: str) -> list[object]:
    value = config_data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidFieldValue(key, "must be a list")
    return value


def _service_entry(service: object, prefix: str) -> dict[str, Any]:
    if service is None:
        raise InvalidFieldValue(prefix, "must not be null")
    if not isinstance(service, dict):
        raise InvalidFieldValue(prefix, "must be an object")
    return service


def _require_fields(entry: dict[str, Any], prefix: str, fields: tuple[str, ...]) -> None:
    for field in fields:
        value = entry.get(field)
        if value is None:
            raise InvalidFieldValue(f"{prefix}.{field}", "is required")
        if not is_non_blank(value):
            raise InvalidFieldValue(f"{prefix}.{field}", "must not be blank")


def _string_value(entry: dict[str, Any], field: str, prefix: str) -> str:
    value = entry.get(field)
    if not isinstance(value, str):
        raise InvalidFieldValue(f"{prefix}.{field}", "must be a string")
    if not value.strip():
        raise InvalidFieldValue(f"{prefix}.{field}", "must not be blank")
    return value


def _check_duplicate(seen: set[str], code: str, path: str) -> None:
    if code in seen:
        raise DuplicateServiceCode(path, code)
    seen.add(code)


def _check_timeout(raw: object, path: str) -> None:
    timeout: float
    if isinstance(raw, bool):
        raise InvalidFieldValue(path, "must be a number or numeric string")
    if isinstance(raw, (int, float)):
        timeout = raw
    elif isinstance(raw, str):
        parsed = _parse_long(raw)
        if parsed is None:
            raise InvalidFieldValue(path, "format error, expected a positive integer")
        timeout = parsed
    else:
        raise InvalidFieldValue(path, "must be a number or numeric string")

    if not MIN_TIMEOUT_MS <= timeout <= MAX_TIMEOUT_MS:
        raise InvalidFieldValue(
            path, f"must be between {MIN_TIMEOUT_MS} and {MAX_TIMEOUT_MS} milliseconds"
        )


def _parse_long(raw: str) -> int | None:
    """Parse a signed decimal string that fits in 64 bits, else return None."""
    if not _INTEGER_STRING.fullmatch(raw):
        return None
    digits = raw.lstrip("+-").lstrip("0")
    if len(digits) > 19:
        return None
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value
