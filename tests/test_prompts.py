"""Payer input validation."""

from decimal import Decimal

import pytest

from momocollect.common.errors import ValidationError
from momocollect.services.cli.prompts import build_payment_request, normalize_phone, parse_amount


@pytest.mark.parametrize(
    "raw",
    ["0", "-1", "abc", "", "inf", "NaN", "1e999999999", "1e100000", "1000000000000", "10.001"],
)
def test_parse_amount_rejects(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_parse_amount_keeps_exact_decimal():
    assert parse_amount(" 100.25 ") == Decimal("100.25")
    assert parse_amount("10.500") == Decimal("10.5")
    assert parse_amount("999999999999.99") == Decimal("999999999999.99")


def test_serialized_amount_stays_short():
    payload = build_payment_request("237670000001", "1e11", "rent").to_gateway_payload()
    assert payload["amount"] == "100000000000"
    with pytest.raises(ValidationError):
        build_payment_request("237670000001", "1e100000", "rent")


def test_normalize_phone():
    assert normalize_phone("+237 670-000-001") == "237670000001"
    with pytest.raises(ValidationError):
        normalize_phone("67000")
    with pytest.raises(ValidationError):
        normalize_phone("23767abc0001")


def test_build_payment_request_requires_description():
    with pytest.raises(ValidationError):
        build_payment_request("237670000001", "10", "   ")


def test_build_payment_request_uses_fixed_currency():
    request = build_payment_request("237670000001", "10", "rent")
    assert request.currency == "XAF"
    assert request.payer_identifier == "237670000001"
