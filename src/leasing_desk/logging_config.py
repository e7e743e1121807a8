"""Structured logging for Leasing Desk using structlog.

Events are snake_case names with key-value context. Two kinds of context are
bound through contextvars: the HTTP request (``request_id``, ``path``,
``method``) and an open lease resolution (``resolution_id``, ``property_id``).
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from leasing_desk.config import Settings, get_settings

# Chatty at DEBUG, kept at INFO or above
_QUIET_LOGGERS = ("httpcore", "httpx", "uvicorn.access", "asyncio")


def _add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["environment"] = settings.environment.value
    return event_dict


def _processors(json_output: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        return [
            *processors,
            _add_app_context,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        *processors,
        structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        ),
    ]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    JSON lines when ``log_format`` is "json" (the production default),
    colored console output otherwise. ``log_file`` adds a plain-text copy.
    Call once at startup.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.value)

    structlog.configure(
        processors=_processors(settings.log_format == "json"),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    if settings.log_file:
        _add_file_handler(settings.log_file, level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))


def _add_file_handler(log_file: Path, level: int) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logging.getLogger().addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a logger; modules call ``get_logger(__name__)``."""
    return structlog.stdlib.get_logger(name)


def bind_request_context(request_id: str, path: str, method: str) -> None:
    """Attach the current HTTP request to every event until cleared."""
    structlog.contextvars.bind_contextvars(request_id=request_id, path=path, method=method)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def resolution_context(resolution_id: str, property_id: str) -> Iterator[None]:
    """Attach a lease resolution to events logged inside the block.

    Context bound outside the block, such as the request, is kept.
    """
    with structlog.contextvars.bound_contextvars(
        resolution_id=resolution_id, property_id=property_id
    ):
        yield
