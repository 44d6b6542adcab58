"""
Logging — structlog setup shared by every checkout component.

    configure_logging(json=False, level="debug")
    log = get_logger("pricing")
    log.info("line_priced", line_ref="42", total="48.00")
"""

from __future__ import annotations

import logging

import structlog
from structlog.typing import FilteringBoundLogger


def configure_logging(*, json: bool = True, level: str = "info") -> None:
    """Configure structlog once at process start."""
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def get_logger(component: str) -> FilteringBoundLogger:
    return structlog.get_logger().bind(component=component)


__all__ = ("configure_logging", "get_logger")
