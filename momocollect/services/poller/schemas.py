"""Transaction status snapshot and poll outcome schemas."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class GatewayStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"


class TransactionStatus(BaseModel):
    """One fresh answer of the status endpoint."""

    model_config = ConfigDict(extra="ignore")

    reference: str | None = None
    external_reference: str | None = None
    status: GatewayStatus = GatewayStatus.UNKNOWN
    amount: Decimal | None = None
    currency: str | None = None
    operator: str | None = None
    code: str | None = None
    operator_reference: str | None = None
    description: str | None = None
    reason: str | None = None
    phone_number: str | None = None
    endpoint: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        # Anything the gateway invents later is treated as still in flight.
        if isinstance(value, str) and value.upper() in GatewayStatus.__members__:
            return GatewayStatus(value.upper())
        return GatewayStatus.UNKNOWN


class PollOutcome(BaseModel):
    """Terminal result of a poll run, reported to the caller."""

    reference: str
    state: str
    attempts: int
    status: TransactionStatus | None = None
    reason: str | None = None
    query_errors: list[str] = []
    unknown_statuses: int = 0
