"""Console input collection and validation.

Everything here runs before the first network call; bad input raises
`ValidationError` and nothing is sent to the gateway.
"""

import re
from collections.abc import Callable
from decimal import Decimal, InvalidOperation

import pydantic

from momocollect.common.errors import ValidationError
from momocollect.services.initiator.schemas import DEFAULT_CURRENCY, PaymentRequest


PHONE_PROMPT = "Enter your phone number (with country code):"
AMOUNT_PROMPT = "Enter the amount to be debited:"
DESCRIPTION_PROMPT = "Enter a description:"

_PHONE_RE = re.compile(r"^\+?\d{9,15}$")

MAX_AMOUNT_DIGITS = 12
MAX_DECIMAL_PLACES = 2


def parse_amount(raw: str) -> Decimal:
    """Parse a strictly positive, finite decimal amount with at most two decimal places."""

    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ValidationError("invalid amount, must be a positive number") from exc
    if not value.is_finite() or value <= 0:
        raise ValidationError("invalid amount, must be a positive number")
    if value.adjusted() >= MAX_AMOUNT_DIGITS:
        raise ValidationError(f"invalid amount, must be below 10^{MAX_AMOUNT_DIGITS}")
    if value.normalize().as_tuple().exponent < -MAX_DECIMAL_PLACES:
        raise ValidationError(f"invalid amount, at most {MAX_DECIMAL_PLACES} decimal places allowed")
    return value


def normalize_phone(raw: str) -> str:
    """Return the payer number as digits only, country code included."""

    cleaned = re.sub(r"[\s-]", "", raw)
    if not _PHONE_RE.match(cleaned):
        raise ValidationError("invalid phone number, expected 9-15 digits including the country code")
    return cleaned.lstrip("+")


def build_payment_request(
    phone: str,
    amount: str,
    description: str,
    currency: str = DEFAULT_CURRENCY,
) -> PaymentRequest:
    description = description.strip()
    if not description:
        raise ValidationError("description is required")
    try:
        return PaymentRequest(
            amount=parse_amount(amount),
            payer_identifier=normalize_phone(phone),
            currency=currency,
            description=description,
        )
    except pydantic.ValidationError as exc:
        raise ValidationError(str(exc)) from exc


def prompt_payment_request(
    input_fn: Callable[[str], str] = input,
    phone: str | None = None,
    amount: str | None = None,
    description: str | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> PaymentRequest:
    """Ask for whichever of phone/amount/description was not given up front."""

    if phone is None:
        phone = input_fn(PHONE_PROMPT + "\n")
    if amount is None:
        amount = input_fn(AMOUNT_PROMPT + "\n")
    if description is None:
        description = input_fn(DESCRIPTION_PROMPT + "\n")
    return build_payment_request(phone, amount, description, currency=currency)
