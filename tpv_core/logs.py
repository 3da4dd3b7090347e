"""Logging setup for the till core."""

import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with JSON rendering and ISO timestamps."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if isinstance(number, int):
        return number
    return logging.INFO
