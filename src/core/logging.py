"""Logging and tracing setup for the Lambda functions, using Pydantic Logfire.

Modules log through the standard library (``logging.getLogger(__name__)``);
the Logfire handler installed by ``configure_logfire`` forwards those records
and the spans opened with ``span()``.

Invocation-scoped records:
    log_invocation(logger, "info", "Batch import complete", invocation, files=2)
"""

import logging

import logfire
from fastapi import FastAPI

from src.core.config import settings
from src.interface.lambda_context import Invocation


# Third-party loggers that log every AWS call at INFO
QUIET_LOGGERS = ("botocore", "boto3", "urllib3")

_configured = False


def configure_logfire(*, service_name: str = "todotasks") -> None:
    """Configure Logfire and route standard logging through it.

    Called at import time by every entry point; a warm Lambda container
    re-imports nothing, so only the first call per process has an effect.
    """
    global _configured  # noqa: PLW0603
    if _configured:
        return

    logfire.configure(
        token=settings.logfire_token,
        service_name=service_name,
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logging.basicConfig(level=logging.INFO, handlers=[logfire.LogfireLoggingHandler()])
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True

    logging.getLogger(__name__).info("Logfire configured", extra={"service": service_name})


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request served by the task API."""
    logfire.instrument_fastapi(app)
    logging.getLogger(__name__).info("FastAPI instrumentation configured")


def span(name: str) -> logfire.LogfireSpan:
    """Open a span around a service operation.

    Usage:
        with span("task_service.create_task"):
            ...
    """
    return logfire.span(name)


def log_invocation(
    logger: logging.Logger,
    level: str,
    message: str,
    invocation: Invocation,
    **extra: object,
) -> None:
    """Log a record stamped with the identifiers of the current invocation.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        invocation: Request, Lambda request and function identifiers
        **extra: Additional context fields (task_id, files, records, etc.)
    """
    context = {
        "request_id": invocation.request_id,
        "lambda_request_id": invocation.lambda_request_id,
        "function_name": invocation.function_name,
        **extra,
    }
    getattr(logger, level.lower())(message, extra=context)
