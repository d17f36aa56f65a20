"""Payment initiation.

Submits one collection request and turns the gateway's synchronous answer
into a transaction reference. Initiation fires once; retrying is left to the
caller.
"""

import pydantic

from momocollect.common.errors import GatewayRejected, ParseError, TransportError
from momocollect.common.gateway import GatewayClient
from momocollect.common.logging import logger
from momocollect.common.metrics import collection_requests_total
from momocollect.common.tracing import get_tracer
from momocollect.services.initiator.schemas import CollectResponse, PaymentRequest


tracer = get_tracer(__name__)


class PaymentInitiator:
    """Sends collection requests and returns the gateway reference."""

    def __init__(self, gateway: GatewayClient, service_name: str = "momocollect") -> None:
        self.gateway = gateway
        self.service_name = service_name

    def _count(self, result: str) -> None:
        collection_requests_total.labels(service=self.service_name, result=result).inc()

    def initiate(self, request: PaymentRequest) -> str:
        """Submit `request` and return the transaction reference.

        Raises `TransportError` (or its `ParseError` subclass) when the gateway
        could not be reached or answered garbage, and `GatewayRejected` when it
        answered with an error code or without a usable reference.
        """

        with tracer.start_as_current_span("collection.initiate") as span:
            span.set_attribute("payment.currency", request.currency)
            logger.info(
                "initiating collection amount=%s currency=%s",
                request.amount,
                request.currency,
            )
            try:
                status_code, data = self.gateway.collect(request.to_gateway_payload())
            except ParseError as exc:
                self._count("parse_error")
                logger.warning("collection response could not be parsed: %s", exc)
                raise
            except TransportError as exc:
                self._count("transport_error")
                logger.warning("collection request failed: %s", exc)
                raise

            # A rejection may arrive in a body that fails the full schema, so
            # error_code is read off the raw object first.
            error_code = data.get("error_code")
            if error_code:
                self._count("rejected")
                message = str(data.get("message") or "collection rejected by gateway")
                logger.warning("gateway rejected collection code=%s message=%s", error_code, message)
                raise GatewayRejected(str(error_code), message)

            if status_code >= 400:
                self._count("rejected")
                message = str(data.get("message") or data.get("detail") or "collection rejected by gateway")
                logger.warning("gateway rejected collection http_status=%s message=%s", status_code, message)
                raise GatewayRejected(f"HTTP_{status_code}", message)

            try:
                collect = CollectResponse.model_validate(data)
            except pydantic.ValidationError as exc:
                self._count("parse_error")
                raise ParseError(f"unexpected collect response shape: {exc}") from exc

            if not collect.reference:
                self._count("rejected")
                logger.warning("gateway accepted collection without a reference")
                raise GatewayRejected("", collect.message or "gateway returned an empty reference")

            self._count("accepted")
            span.set_attribute("payment.reference", collect.reference)
            logger.info(
                "collection accepted reference=%s operator=%s ussd_code=%s",
                collect.reference,
                collect.operator,
                collect.ussd_code,
            )
            return collect.reference
