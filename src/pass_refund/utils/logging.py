"""Structured logging for refund calculations.

Every calculation logs one line through log_refund_calculation(). The line
carries the calculation context as record attributes, together with the
correlation ID of the current request and the deployment environment, so a
log pipeline can filter on any of them.

Usage:
    from pass_refund.utils.logging import configure_logging, correlation_scope

    configure_logging("INFO")
    with correlation_scope("form-1234"):
        compute_regular_refund(data)
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from pass_refund.config import get_settings

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

PACKAGE_LOGGER = "pass_refund"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
NO_CORRELATION_ID = "no-correlation-id"


def get_correlation_id() -> str | None:
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Tag every refund log line inside the block with one correlation ID.

    Args:
        correlation_id: ID supplied by the caller, e.g. a form submission ID.
            A UUID is generated when omitted.

    Yields:
        The correlation ID in effect; the previous one is restored on exit.
    """
    cid = correlation_id or str(uuid.uuid4())
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)


class RefundLogFormatter(logging.Formatter):
    """Prefixes each line with the environment and correlation ID.

    Records that did not come from log_refund_calculation get the current
    values at format time.
    """

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        if not hasattr(record, "environment"):
            record.environment = get_settings().environment
        return f"[{record.environment} {record.correlation_id}] {super().format(record)}"


def configure_logging(level: str = "INFO") -> None:
    """Install a structured stderr handler on the package logger.

    Safe to call more than once; the handler is only added the first time.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG"
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    if not any(getattr(h, "_pass_refund_handler", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(RefundLogFormatter(LOG_FORMAT))
        handler._pass_refund_handler = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)


def log_refund_calculation(
    logger: logging.Logger,
    operation: str,
    *,
    pass_tier: int | None = None,
    elapsed_days: int | None = None,
    method: str | None = None,
    refund_amount: int | None = None,
    used_amount: int | None = None,
    error_codes: list[str] | None = None,
    **extra: Any,
) -> None:
    """Log a refund calculation with structured context.

    Calls that were rejected by validation are logged as warnings.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "compute_regular_refund")
        pass_tier: Pass duration in months
        elapsed_days: Inclusive days used
        method: Calculation branch that produced the result
        refund_amount: Refund in yen
        used_amount: Fare charged for the used portion
        error_codes: Validation error codes, if the input was rejected
        **extra: Additional context fields
    """
    context: dict[str, Any] = {}
    if pass_tier is not None:
        context["pass_tier"] = pass_tier
    if elapsed_days is not None:
        context["elapsed_days"] = elapsed_days
    if method:
        context["method"] = method
    if refund_amount is not None:
        context["refund_amount"] = refund_amount
    if used_amount is not None:
        context["used_amount"] = used_amount
    if error_codes:
        context["error_codes"] = ",".join(error_codes)
    context.update(extra)

    message = " | ".join(
        [f"Refund calculation: {operation}"] + [f"{key}={value}" for key, value in context.items()]
    )

    context.update(
        operation=operation,
        correlation_id=get_correlation_id() or NO_CORRELATION_ID,
        environment=get_settings().environment,
    )
    logger.log(logging.WARNING if error_codes else logging.INFO, message, extra=context)
