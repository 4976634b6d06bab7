"""Correlation ID logging context for tracing one customer's messages.

Provides a customer-aware logger that attaches the customer identifier
(the sender's phone number) to every log record, making it easy to follow
a single conversation through parsing, state transitions, and booking.

Usage:
    from booking_assistant.logging_context import get_customer_logger, set_customer_id

    set_customer_id("+972501234567")
    logger = get_customer_logger(__name__)
    logger.info("Processing message")  # record.customer_id == "+972501234567"
"""

import logging
from contextvars import ContextVar

_customer_id: ContextVar[str] = ContextVar("customer_id", default="NO_CUSTOMER")


def set_customer_id(customer_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _customer_id.set(customer_id)


def get_customer_id() -> str:
    """Retrieve the current correlation ID."""
    return _customer_id.get()


class CustomerIdFilter(logging.Filter):
    """Injects customer_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.customer_id = _customer_id.get()  # type: ignore[attr-defined]
        return True


def add_customer_id_filter(target: logging.Filterer) -> None:
    """Attach a CustomerIdFilter to a logger or handler, at most once."""
    if not any(isinstance(f, CustomerIdFilter) for f in target.filters):
        target.addFilter(CustomerIdFilter())


def get_customer_logger(name: str) -> logging.Logger:
    """Return a logger with the CustomerIdFilter attached.

    The filter adds ``customer_id`` to each record; the log format set up by
    ``load_config`` prints it as ``[%(customer_id)s]``.
    """
    logger = logging.getLogger(name)
    add_customer_id_filter(logger)
    return logger
