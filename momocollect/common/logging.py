"""Structured JSON logging with transaction context fields."""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter


service_name_ctx: ContextVar[str] = ContextVar("service_name", default="momocollect")
reference_ctx: ContextVar[str] = ContextVar("reference", default="")


class ContextFilter(logging.Filter):
    """Inject service name and the current transaction reference into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = service_name_ctx.get()
        record.reference = reference_ctx.get()
        return True


def configure_logging(level: str = "INFO", service_name: str = "momocollect") -> None:
    """Configure root logger once per process."""

    service_name_ctx.set(service_name)
    handler = logging.StreamHandler(sys.stderr)
    context_filter = ContextFilter()
    handler.addFilter(context_filter)
    formatter = JsonFormatter("%(asctime)s %(levelname)s %(service_name)s %(reference)s %(message)s")
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())
    root.addFilter(context_filter)


logger = logging.getLogger("momocollect")
