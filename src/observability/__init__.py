"""Observability module for logging and metrics."""

from src.observability.logging import bind_run_context, configure_logging
from src.observability.metrics import collect_metrics, reset_metrics


__all__ = [
    "bind_run_context",
    "collect_metrics",
    "configure_logging",
    "reset_metrics",
]
