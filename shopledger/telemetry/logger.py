"""
Structured Logging

Every request gets a correlation ID. It is bound into structlog's
context variables so that every log line emitted while handling the
request carries it, without passing it through each call.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog (JSON lines) on top of stdlib logging."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a request. Everything logged while
    it is bound carries the same ID.
    """
    return uuid4()


def bind_correlation_id(correlation_id: UUID, **extra) -> None:
    """Start a fresh logging context for one request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        correlation_id=str(correlation_id),
        **extra,
    )


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()


configure_logging()
