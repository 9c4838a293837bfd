"""Structured logging configuration using structlog.

Provides JSON-formatted logs for production log aggregation while keeping a
human-readable console format for development. Upload handlers wrap the
pipeline in ``ingestion_context`` so every event of one ingestion carries the
same company and caller identifiers.

Usage::

    from finstatements.logging_config import get_logger, ingestion_context

    logger = get_logger(__name__)
    with ingestion_context(company_id=3, user_id=1):
        logger.info("statement_upload_started", statement_type="balance_sheet")
    # Output: {"company_id": 3, "user_id": 1, "event": "statement_upload_started", ...}
"""

import logging
import sys
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator

import structlog


def _enum_values(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Render enum fields (ingestion state, statement type) by value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        json_logs: If True, output JSON format. If False, use human-readable format.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    # Stdlib loggers (services, clients) share the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _enum_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def ingestion_context(**fields: Any) -> Iterator[None]:
    """Bind ingestion identifiers to every structlog event inside the block.

    ``None`` values are skipped, so optional fields such as ``quarter`` can
    be passed straight through.
    """
    bound = {key: value for key, value in fields.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ of the module.
    """
    return structlog.get_logger(name)
