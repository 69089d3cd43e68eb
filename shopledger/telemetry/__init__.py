"""Logging package."""

from shopledger.telemetry.logger import (
    bind_correlation_id,
    clear_log_context,
    configure_logging,
    create_correlation_id,
    get_logger,
)

__all__ = [
    "bind_correlation_id",
    "clear_log_context",
    "configure_logging",
    "create_correlation_id",
    "get_logger",
]
