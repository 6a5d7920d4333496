"""Observability and logging facades."""

from .logging import (
    configure_logging,
    current_log_context,
    get_logger,
    log_context,
    log_exception,
)
from .metrics import (
    Timer,
    format_prometheus,
    get_counter_value,
    get_metrics_summary,
    increment_counter,
    observe_histogram,
    record_config_save,
    record_gateway_decision,
    record_login_attempt,
)

__all__ = [
    # Logging
    "configure_logging",
    "current_log_context",
    "get_logger",
    "log_context",
    "log_exception",
    # Metrics
    "Timer",
    "format_prometheus",
    "get_counter_value",
    "get_metrics_summary",
    "increment_counter",
    "observe_histogram",
    "record_config_save",
    "record_gateway_decision",
    "record_login_attempt",
]
