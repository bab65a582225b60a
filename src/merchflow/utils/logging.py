"""Logging configuration for MerchFlow.

Standard library handlers do the writing (console plus one rotating file);
structlog formats the records, as JSON in production and as coloured
console output everywhere else. Every record carries the service name and
environment, and whatever ``add_context``/``operation_context`` bound: the
request id and path from the HTTP middleware, the order operation and
order id from the lifecycle engine.
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog

SERVICE = "merchflow"

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def _environment() -> str:
    return (os.getenv("ENV") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, otherwise the default for the environment."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(_environment(), "INFO")).upper()


def add_service(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Stamp every record with the service and the environment it runs in."""
    event_dict.setdefault("service", SERVICE)
    event_dict.setdefault("env", _environment())
    return event_dict


def setup_stdlib_logging(log_dir: str = "logs") -> None:
    log_level = get_log_level()

    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_path / f"{SERVICE}.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [logging.StreamHandler(sys.stdout), file_handler]

    # Protean and the database driver are chatty at DEBUG
    for noisy in ("protean", "sqlalchemy.engine", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def setup_structlog() -> None:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        add_service,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if _environment() in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(max_frames=2),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str = "logs") -> None:
    setup_stdlib_logging(log_dir=log_dir)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values to every log record emitted from here on in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def operation_context(operation: str, **identifiers: Any) -> Iterator[None]:
    """Bind ``operation`` and the given ids for the duration of the block.

    Ids that are ``None`` are left out; the others are logged as strings.
    Bindings made outside the block are restored when it exits.
    """
    bound = {key: str(value) for key, value in identifiers.items() if value is not None}
    with structlog.contextvars.bound_contextvars(operation=operation, **bound):
        yield
