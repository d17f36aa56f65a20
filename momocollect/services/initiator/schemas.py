"""Collection request/response schemas for the gateway's collect endpoint."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


DEFAULT_CURRENCY = "XAF"


class PaymentRequest(BaseModel):
    """One collection request, built once per run from validated payer input."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    amount: Decimal = Field(gt=0)
    payer_identifier: str = Field(min_length=1, alias="from")
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    description: str = ""

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> str:
        return format(amount, "f")

    def to_gateway_payload(self) -> dict:
        """Serialize to `{amount, from, currency, description}`."""

        return self.model_dump(by_alias=True)


class CollectResponse(BaseModel):
    """Synchronous answer of the collect endpoint."""

    model_config = ConfigDict(extra="ignore")

    reference: str | None = None
    ussd_code: str | None = None
    operator: str | None = None
    message: str | None = None
    error_code: str | None = None
