"""Tests for capcheck.validators.gateway — subscribed and published service lists."""

from __future__ import annotations

from typing import Any

import pytest

from capcheck.errors import DuplicateServiceCode, InvalidFieldValue, ValidationError
from capcheck.validators.gateway import URL_PATTERN, GatewayServiceValidator

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _subscribed(code: str = "SVC1", **overrides: Any) -> dict[str, Any]:
    service = {"serviceCode": code, "systemCode": "SYS1", "serviceName": "Orders"}
    service.update(overrides)
    return service


def _published(code: str = "PUB1", **overrides: Any) -> dict[str, Any]:
    service = {
        "serviceCode": code,
        "serviceName": "Billing",
        "gatewayUrl": "https://api.example.com/billing",
        "timeoutMs": 3000,
    }
    service.update(overrides)
    return service


def _validate(config: dict[str, Any] | None) -> None:
    GatewayServiceValidator().validate("gateway", config)


# ---------------------------------------------------------------------------
# Service list presence
# ---------------------------------------------------------------------------


class TestServiceLists:
    def test_missing_config(self) -> None:
        with pytest.raises(ValidationError, match="missing configuration data"):
            _validate(None)

    @pytest.mark.parametrize(
        "config",
        [
            {},
            {"subscribedServices": []},
            {"subscribedServices": [], "publishedServices": []},
            {"subscribedServices": None, "publishedServices": None},
        ],
    )
    def test_requires_at_least_one_service(self, config: dict[str, Any]) -> None:
        with pytest.raises(ValidationError, match="at least one subscribed or published"):
            _validate(config)

    def test_subscribed_only(self) -> None:
        _validate({"subscribedServices": [_subscribed()]})

    def test_published_only(self) -> None:
        _validate({"publishedServices": [_published()]})

    def test_list_must_be_a_list(self) -> None:
        with pytest.raises(InvalidFieldValue) as exc_info:
            _validate({"subscribedServices": {"serviceCode": "SVC1"}})
        assert exc_info.value.path == "subscribedServices"

    def test_entry_must_be_an_object(self) -> None:
        with pytest.raises(InvalidFieldValue, match="must be an object"):
            _validate({"subscribedServices": ["SVC1"]})

    def test_entry_must_not_be_null(self) -> None:
        with pytest.raises(InvalidFieldValue, match="must not be null"):
            _validate({"publishedServices": [None]})


# ---------------------------------------------------------------------------
# Subscribed services
# ---------------------------------------------------------------------------


class TestSubscribedServices:
    @pytest.mark.parametrize("field", ["serviceCode", "systemCode", "serviceName"])
    def test_required_field_missing(self, field: str) -> None:
        service = _subscribed()
        del service[field]
        with pytest.raises(InvalidFieldValue) as exc_info:
            _validate({"subscribedServices": [service]})
        assert exc_info.value.path == f"subscribedServices[0].{field}"
        assert exc_info.value.message.endswith("is required")

    def test_blank_field(self) -> None:
        with pytest.raises(InvalidFieldValue) as exc_info:
            _validate({"subscribedServices": [_subscribed(serviceName="   ")]})
        assert exc_info.value.message == "subscribedServices[0].serviceName must not be blank"

    def test_service_code_must_be_string(self) -> None:
        with pytest.raises(InvalidFieldValue, match="must be a string"):
            _validate({"subscribedServices": [_subscribed(code=123)]})  # type: ignore[arg-type]

    def test_duplicate_service_code(self) -> None:
        with pytest.raises(DuplicateServiceCode) as exc_info:
            _validate(
                {"subscribedServices": [_subscribed("SVC1"), _subscribed("SVC1")]}
            )
        assert exc_info.value.path == "subscribedServices[1].serviceCode"
        assert exc_info.value.code == "SVC1"
        assert "'SVC1'" in exc_info.value.message

    def test_duplicate_reports_later_index(self) -> None:
        with pytest.raises(DuplicateServiceCode) as exc_info:
            _validate(
                {
                    "subscribedServices": [
                        _subscribed("SVC1"),
                        _subscribed("SVC2"),
                        _subscribed("SVC1"),
                    ]
                }
            )
        assert exc_info.value.path == "subscribedServices[2].serviceCode"

    def test_codes_unique_per_list(self) -> None:
        _validate(
            {
                "subscribedServices": [_subscribed("SVC1")],
                "publishedServices": [_published("SVC1")],
            }
        )


# ---------------------------------------------------------------------------
# Published services
# ---------------------------------------------------------------------------


class TestPublishedServices:
    @pytest.mark.parametrize("field", ["serviceCode", "serviceName", "gatewayUrl", "timeoutMs"])
    def test_required_field_missing(self, field: str) -> None:
        service = _published()
        del service[field]
        with pytest.raises(InvalidFieldValue) as exc_info:
            _validate({"publishedServices": [service]})
        assert exc_info.value.path == f"publishedServices[0].{field}"

    def test_duplicate_service_code(self) -> None:
        with pytest.raises(DuplicateServiceCode) as exc_info:
            _validate({"publishedServices": [_published("P"), _published("P")]})
        assert exc_info.value.path == "publishedServices[1].serviceCode"

    @pytest.mark.parametrize(
        "url",
        [
            "http://api.example.com",
            "https://api.example.com/v1/orders?id=1",
            "https://gateway.internal.example.cn:8443/path",
            "http://10.0.0.1:8080/api",
            "http://192.168.1.20",
        ],
    )
    def test_valid_url(self, url: str) -> None:
        _validate({"publishedServices": [_published(gatewayUrl=url)]})

    @pytest.mark.parametrize(
        "url",
        [
            "ftp://api.example.com",
            "api.example.com/path",
            "http://localhost:8080",
            "https://-bad.example.com",
            "http://example.com:123456",
            "https://exa mple.com",
        ],
    )
    def test_invalid_url(self, url: str) -> None:
        with pytest.raises(InvalidFieldValue) as exc_info:
            _validate({"publishedServices": [_published(gatewayUrl=url)]})
        assert exc_info.value.path == "publishedServices[0].gatewayUrl"

    def test_url_must_be_string(self) -> None:
        with pytest.raises(InvalidFieldValue, match="must be a string"):
            _validate({"publishedServices": [_published(gatewayUrl=["https://a.com"])]})

    @pytest.mark.parametrize("timeout", [1, 30000, 2500.0, "1", "30000", "+100"])
    def test_valid_timeout(self, timeout: object) -> None:
        _validate({"publishedServices": [_published(timeoutMs=timeout)]})

    @pytest.mark.parametrize(
        "timeout", [0, -5, 30001, "40000", "0", 0.5, 30000.5, "-9223372036854775808"]
    )
    def test_timeout_out_of_range(self, timeout: object) -> None:
        with pytest.raises(InvalidFieldValue) as exc_info:
            _validate({"publishedServices": [_published(timeoutMs=timeout)]})
        assert exc_info.value.path == "publishedServices[0].timeoutMs"
        assert "between 1 and 30000" in exc_info.value.message

    @pytest.mark.parametrize(
        "timeout", ["abc", "12.5", "1e3", " 100", "99999999999999999999", "9" * 5000]
    )
    def test_timeout_parse_error(self, timeout: str) -> None:
        with pytest.raises(InvalidFieldValue, match="format error"):
            _validate({"publishedServices": [_published(timeoutMs=timeout)]})

    @pytest.mark.parametrize("timeout", [True, {"ms": 10}])
    def test_timeout_wrong_type(self, timeout: object) -> None:
        with pytest.raises(InvalidFieldValue, match="number or numeric string"):
            _validate({"publishedServices": [_published(timeoutMs=timeout)]})


class TestUrlPattern:
    def test_requires_full_match(self) -> None:
        assert URL_PATTERN.fullmatch("https://a.example.com/x")
        assert not URL_PATTERN.fullmatch("see https://a.example.com/x")
