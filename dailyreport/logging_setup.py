"""Structured logging configuration.

structlog events are rendered as JSON and handed to the stdlib logging tree,
so handlers configured from ``config/logging.yaml`` receive them alongside
plain ``logging`` records from the adapters.
"""

from __future__ import annotations

import logging

import structlog


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure structlog to emit JSON merged with bound context variables."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
