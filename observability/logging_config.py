"""
Structured Logging Configuration
================================

structlog setup shared by the agent, the executor and the HTTP layer.

Agent events carry SQL text and user questions, which can be long; they are
shortened before rendering so a single runaway query does not flood the logs.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

# Event fields that hold free text from users or the model
LONG_TEXT_FIELDS = ("sql", "request", "error", "diagnosis")
MAX_FIELD_LENGTH = 500

QUIET_LOGGERS = ("uvicorn.access", "httpx", "openai", "sqlalchemy.engine")


def shorten_long_fields(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    for key in LONG_TEXT_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > MAX_FIELD_LENGTH:
            event_dict[key] = value[:MAX_FIELD_LENGTH] + "..."
    return event_dict


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Root log level name
        json_format: Render JSON lines instead of the colored console format
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        shorten_long_fields,
    ]

    if json_format:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # uvicorn, SQLAlchemy and the openai SDK log through stdlib logging
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs: Any) -> None:
    """Attach key/values (request id, etc.) to every later event in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
