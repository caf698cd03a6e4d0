# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Structured Logging
structlog setup shared by the classifier, normalizer and batch runner.

Context travels through structlog contextvars rather than arguments:
process_all() binds batch_id for the whole run, and normalize() binds
filename around each image. asyncio.to_thread copies the context into the
worker thread, so per-image events still carry the batch_id.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from borderfit.config import get_settings


def _add_app_info(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    """Tag every event so borderfit lines can be filtered in a shared log."""
    event_dict["app"] = "borderfit"
    return event_dict


def _renderer(level_name: str) -> list[Processor]:
    if level_name == "DEBUG":
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(sort_keys=False),
    ]


def configure_logging(log_level: str | None = None) -> None:
    """
    Route borderfit events to stdout: coloured console lines at DEBUG,
    one JSON object per event otherwise. Libraries embedding borderfit
    may skip this and keep their own structlog configuration.

    Args:
        log_level: Overrides Settings.log_level when given.
    """
    level_name = (log_level or get_settings().log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    # batch_id / filename come from contextvars bound by process_all / normalize
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_app_info,
        *_renderer(level_name),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "borderfit") -> structlog.BoundLogger:
    """
    Return a structlog logger for a borderfit module.

        log = get_logger(__name__)
        with structlog.contextvars.bound_contextvars(filename="shoe.jpg"):
            log.debug("trim_candidate", threshold=8, reduction=0.12)

    renders as {"event": "trim_candidate", "batch_id": "...",
    "filename": "shoe.jpg", "threshold": 8, ...} once configure_logging()
    has run.
    """
    return structlog.get_logger(name)
