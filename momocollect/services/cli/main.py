"""Command-line entrypoint: collect one mobile-money payment.

Loads settings, asks for payer input, initiates the collection and polls the
gateway until the transaction settles. This is the only place that turns
errors and outcomes into messages and exit codes.
"""

import argparse
import sys
from collections.abc import Callable

from momocollect.common import state_machine
from momocollect.common.config import Settings, load_settings
from momocollect.common.errors import (
    ConfigurationError,
    GatewayRejected,
    TransportError,
    ValidationError,
)
from momocollect.common.gateway import GatewayClient
from momocollect.common.logging import configure_logging, logger
from momocollect.common.metrics import serve_metrics
from momocollect.common.startup import log_startup_config
from momocollect.common.tracing import setup_tracing
from momocollect.services.cli.prompts import prompt_payment_request
from momocollect.services.initiator.service import PaymentInitiator
from momocollect.services.poller.schemas import PollOutcome
from momocollect.services.poller.service import StatusPoller
from momocollect.services.sandbox.transport import SandboxGateway


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

SANDBOX_API_KEY = "sandbox"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Collect a mobile-money payment through the gateway.")
    parser.add_argument("--phone", default=None, help="Payer phone number with country code")
    parser.add_argument("--amount", default=None, help="Amount to debit")
    parser.add_argument("--description", default=None, help="Payment description")
    parser.add_argument("--max-attempts", type=int, default=None, help="Status poll budget")
    parser.add_argument("--interval", type=float, default=None, help="Seconds between status polls")
    parser.add_argument(
        "--sandbox",
        action="store_true",
        help="Talk to an in-process scripted gateway instead of the real one",
    )
    return parser


def describe_outcome(outcome: PollOutcome) -> tuple[str, int]:
    """Map a terminal poll outcome to a user-facing message and exit code."""

    if outcome.state == state_machine.SUCCESSFUL:
        lines = ["TRANSACTION SUCCESSFUL", f"Reference: {outcome.reference}"]
        status = outcome.status
        if status is not None:
            lines.append(f"Amount: {status.amount} {status.currency or ''}".rstrip())
            lines.append(f"Operator: {status.operator or '-'}")
            lines.append(f"Operator reference: {status.operator_reference or '-'}")
        return "\n".join(lines), EXIT_OK
    if outcome.state == state_machine.FAILED:
        return f"TRANSACTION FAILED\nReason: {outcome.reason or 'not given by the gateway'}", EXIT_FAILED
    message = (
        f"TRANSACTION NOT CONFIRMED: no final status after {outcome.attempts} checks. "
        f"It may still complete; check reference {outcome.reference} later."
    )
    return message, EXIT_OK


def run(
    settings: Settings,
    args: argparse.Namespace,
    input_fn: Callable[[str], str] | None = None,
    out: Callable[[str], None] = print,
    sleep: Callable[[float], None] | None = None,
    transport=None,
) -> int:
    """Run one collection end to end and return the process exit code."""

    try:
        request = prompt_payment_request(
            input_fn=input_fn or input,
            phone=args.phone,
            amount=args.amount,
            description=args.description,
            currency=settings.currency,
        )
    except ValidationError as exc:
        out(f"Invalid input: {exc}")
        return EXIT_USAGE
    except EOFError:
        out("Invalid input: no input received")
        return EXIT_USAGE

    max_attempts = args.max_attempts if args.max_attempts is not None else settings.poll_max_attempts
    interval = args.interval if args.interval is not None else settings.poll_interval_seconds
    if max_attempts < 1 or interval < 0:
        out("Invalid input: --max-attempts must be at least 1 and --interval must not be negative")
        return EXIT_USAGE

    poller_kwargs = {"service_name": settings.service_name}
    if sleep is not None:
        poller_kwargs["sleep"] = sleep

    with GatewayClient.from_settings(settings, transport=transport) as gateway:
        initiator = PaymentInitiator(gateway, service_name=settings.service_name)
        try:
            reference = initiator.initiate(request)
        except GatewayRejected as exc:
            out(f"Payment initiation rejected by the gateway: {exc}")
            return EXIT_FAILED
        except TransportError as exc:
            out(f"Payment initiation failed, no usable answer from the gateway: {exc}")
            return EXIT_FAILED

        out("Payment request sent. Waiting for user confirmation...")
        poller = StatusPoller(gateway, **poller_kwargs)
        outcome = poller.poll(reference, max_attempts=max_attempts, interval=interval)

    message, code = describe_outcome(outcome)
    out(message)
    return code


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    args = build_parser().parse_args(argv)
    transport = None
    overrides = {}
    if args.sandbox:
        transport = SandboxGateway().transport()
        overrides["api_key"] = SANDBOX_API_KEY

    try:
        settings = load_settings(**overrides)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(settings.log_level, settings.service_name)
    setup_tracing(settings.service_name, settings.otel_exporter_otlp_endpoint)
    log_startup_config(
        settings,
        ["base_url", "api_key", "currency", "poll_max_attempts", "poll_interval_seconds", "metrics_port"],
    )
    if settings.metrics_port:
        serve_metrics(settings.metrics_port)

    try:
        return run(settings, args, transport=transport)
    except KeyboardInterrupt:
        logger.warning("interrupted by user")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    raise SystemExit(main())
