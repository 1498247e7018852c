"""
Observability Module
====================

Metrics, tracing, and structured logging for the dashboard API.
"""

from observability.metrics import setup_metrics, track_chat_metrics, track_extraction_metrics
from observability.tracing import setup_tracing
from observability.logging_config import bind_context, clear_context, setup_logging

__all__ = [
    "setup_metrics",
    "track_chat_metrics",
    "track_extraction_metrics",
    "setup_tracing",
    "setup_logging",
    "bind_context",
    "clear_context",
]
