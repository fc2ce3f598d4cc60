"""
Logging setup for hosts that want rollout's structlog output formatted.

Usage:
    from rollout.core.logs import configure_logging
    configure_logging(get_settings())
"""

import logging
from typing import Any

import structlog

from .config import RolloutSettings


def add_namespace(namespace: str | None):
    """
    Build a structlog processor that tags every event with the key namespace.
    """
    def processor(
        logger: Any,
        method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        if namespace:
            event_dict.setdefault("namespace", namespace)
        return event_dict

    return processor


def configure_logging(settings: RolloutSettings) -> None:
    """Configure stdlib logging and structlog from settings."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format="%(message)s")

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_namespace(settings.namespace),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
