"""In-process scripted gateway for running the workflow without credentials.

Outcomes are forced by the payer number, the same way a simulated provider
forces timeouts and declines from magic customer ids:

* numbers ending in ``0000`` fail with "insufficient funds"
* numbers ending in ``9999`` never leave PENDING
* amounts above 1,000,000 are rejected at initiation with ``ER201``
* everything else succeeds after ``pending_rounds`` PENDING answers
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from uuid import uuid4

import httpx

from momocollect.common.logging import logger


MAX_SANDBOX_AMOUNT = Decimal("1000000")


@dataclass
class _SandboxTransaction:
    reference: str
    amount: str
    currency: str
    phone_number: str
    description: str
    polls: int = 0


@dataclass
class SandboxGateway:
    """Keeps per-reference poll counters and answers like the real gateway."""

    pending_rounds: int = 2
    transactions: dict[str, _SandboxTransaction] = field(default_factory=dict)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == "POST" and path == "/api/collect/":
            return self._collect(request)
        if request.method == "GET" and path.startswith("/api/transaction/"):
            reference = path[len("/api/transaction/"):].strip("/")
            return self._status(reference)
        return httpx.Response(404, json={"detail": "Not found."})

    def _collect(self, request: httpx.Request) -> httpx.Response:
        try:
            body = json.loads(request.content or b"{}")
            amount = Decimal(str(body.get("amount")))
        except (ValueError, InvalidOperation):
            return httpx.Response(400, json={"message": "Invalid amount", "error_code": "ER101"})
        if amount > MAX_SANDBOX_AMOUNT:
            return httpx.Response(
                400,
                json={"message": "Maximum amount exceeded for sandbox", "error_code": "ER201"},
            )

        reference = str(uuid4())
        self.transactions[reference] = _SandboxTransaction(
            reference=reference,
            amount=str(body.get("amount")),
            currency=body.get("currency") or "XAF",
            phone_number=body.get("from") or "",
            description=body.get("description") or "",
        )
        logger.info("sandbox accepted collection reference=%s", reference)
        return httpx.Response(
            200,
            json={"reference": reference, "ussd_code": "*126#", "operator": "MTN"},
        )

    def _status(self, reference: str) -> httpx.Response:
        txn = self.transactions.get(reference)
        if txn is None:
            return httpx.Response(404, json={"detail": "Not found."})
        txn.polls += 1

        status, reason = "PENDING", None
        if txn.phone_number.endswith("0000"):
            status, reason = "FAILED", "insufficient funds"
        elif txn.phone_number.endswith("9999"):
            status = "PENDING"
        elif txn.polls > self.pending_rounds:
            status = "SUCCESSFUL"

        return httpx.Response(
            200,
            json={
                "reference": txn.reference,
                "external_reference": None,
                "status": status,
                "amount": txn.amount,
                "currency": txn.currency,
                "operator": "MTN",
                "code": "CP0000",
                "operator_reference": f"MP{txn.reference[:8].upper()}" if status == "SUCCESSFUL" else None,
                "description": txn.description,
                "reason": reason,
                "phone_number": txn.phone_number,
                "endpoint": "collect",
            },
        )
