"""Transaction status polling.

Queries the status endpoint at a fixed interval until the gateway reports a
terminal status or the attempt budget runs out. The first round fires
immediately; every later round waits exactly one interval first. Transport
and parse failures only cost the current round.
"""

import time
from collections.abc import Callable

import pydantic

from momocollect.common import state_machine
from momocollect.common.errors import ParseError, TransportError
from momocollect.common.gateway import GatewayClient
from momocollect.common.logging import logger, reference_ctx
from momocollect.common.metrics import (
    poll_duration_seconds,
    poll_rounds_total,
    transaction_outcomes_total,
)
from momocollect.common.tracing import get_tracer
from momocollect.services.poller.schemas import GatewayStatus, PollOutcome, TransactionStatus


DEFAULT_MAX_ATTEMPTS = 12
DEFAULT_INTERVAL_SECONDS = 5.0

tracer = get_tracer(__name__)


class StatusPoller:
    """Drives one transaction from PENDING to a terminal state."""

    def __init__(
        self,
        gateway: GatewayClient,
        service_name: str = "momocollect",
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.gateway = gateway
        self.service_name = service_name
        self._sleep = sleep
        self._clock = clock

    def fetch_status(self, reference: str) -> TransactionStatus:
        """Run one status query, raising `TransportError`/`ParseError` on failure."""

        status_code, data = self.gateway.transaction_status(reference)
        if status_code >= 400:
            detail = data.get("message") or data.get("detail") or ""
            raise TransportError(f"status endpoint returned HTTP {status_code} {detail}".rstrip())
        try:
            return TransactionStatus.model_validate(data)
        except pydantic.ValidationError as exc:
            raise ParseError(f"unexpected status response shape: {exc}") from exc

    def _classify(self, snapshot: TransactionStatus) -> str:
        if snapshot.status is GatewayStatus.SUCCESSFUL:
            return state_machine.SUCCESSFUL
        if snapshot.status is GatewayStatus.FAILED:
            return state_machine.FAILED
        return state_machine.PENDING

    def poll(
        self,
        reference: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ) -> PollOutcome:
        """Poll `reference` until SUCCESSFUL, FAILED or TIMED_OUT."""

        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if interval < 0:
            raise ValueError("interval must not be negative")

        token = reference_ctx.set(reference)
        started = self._clock()
        state = state_machine.PENDING
        query_errors: list[str] = []
        unknown_statuses = 0
        snapshot: TransactionStatus | None = None
        attempts = 0
        try:
            with tracer.start_as_current_span("collection.poll") as span:
                span.set_attribute("payment.reference", reference)
                for attempt in range(max_attempts):
                    if attempt > 0:
                        self._sleep(interval)
                    attempts = attempt + 1

                    try:
                        current = self.fetch_status(reference)
                    except TransportError as exc:
                        # ParseError lands here too; both only cost this round.
                        state_machine.validate_transition(state, state_machine.QUERY_ERROR)
                        state = state_machine.QUERY_ERROR
                        query_errors.append(str(exc))
                        poll_rounds_total.labels(service=self.service_name, classification="query_error").inc()
                        logger.warning("status query failed attempt=%s/%s: %s", attempts, max_attempts, exc)
                        continue

                    snapshot = current
                    new_state = self._classify(current)
                    if current.status is GatewayStatus.UNKNOWN:
                        unknown_statuses += 1
                    state_machine.validate_transition(state, new_state)
                    state = new_state
                    poll_rounds_total.labels(
                        service=self.service_name,
                        classification=current.status.value.lower(),
                    ).inc()
                    logger.info("status attempt=%s/%s status=%s", attempts, max_attempts, current.status.value)

                    if state_machine.is_terminal(state):
                        break
                else:
                    state_machine.validate_transition(state, state_machine.TIMED_OUT)
                    state = state_machine.TIMED_OUT

                span.set_attribute("payment.state", state)
                span.set_attribute("payment.attempts", attempts)

            outcome = PollOutcome(
                reference=reference,
                state=state,
                attempts=attempts,
                status=snapshot,
                reason=snapshot.reason if state == state_machine.FAILED and snapshot else None,
                query_errors=query_errors,
                unknown_statuses=unknown_statuses,
            )
            self._record(outcome, self._clock() - started)
            return outcome
        finally:
            reference_ctx.reset(token)

    def _record(self, outcome: PollOutcome, elapsed: float) -> None:
        transaction_outcomes_total.labels(service=self.service_name, state=outcome.state).inc()
        poll_duration_seconds.labels(service=self.service_name, state=outcome.state).observe(max(0.0, elapsed))
        if outcome.state == state_machine.SUCCESSFUL:
            logger.info("transaction successful attempts=%s", outcome.attempts)
        elif outcome.state == state_machine.FAILED:
            logger.warning("transaction failed attempts=%s reason=%s", outcome.attempts, outcome.reason)
        else:
            logger.warning(
                "transaction still pending after %s attempts query_errors=%s",
                outcome.attempts,
                len(outcome.query_errors),
            )
