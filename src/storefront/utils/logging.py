"""Logging for the storefront.

Records flow through the standard library (console, plus rotating files
outside tests) and are rendered by structlog. The deployment environment is
resolved once and decides both the level and the renderer: JSON lines in
production and staging, a Rich console view in development.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_JSON_ENVIRONMENTS = {"production", "staging"}

# Libraries that are chatty at DEBUG and add nothing to checkout traces
_QUIET_LOGGERS = ("asyncio", "urllib3", "protean", "sqlalchemy.engine", "uvicorn.access")

_MAX_LOG_BYTES = 10 * 1024 * 1024


def resolve_environment() -> str:
    """Deployment environment, from the first of ENV, ENVIRONMENT or PROTEAN_ENV."""
    for name in ("ENV", "ENVIRONMENT", "PROTEAN_ENV"):
        value = os.getenv(name)
        if value:
            return value.lower()
    return "development"


def get_log_level(env: str | None = None) -> str:
    env = env or resolve_environment()
    return os.getenv("LOG_LEVEL", _LEVELS.get(env, "INFO")).upper()


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def build_handlers(env: str, level: str, log_dir: str | None = None) -> list[logging.Handler]:
    """Console always; ``storefront.log`` and ``storefront_error.log`` unless testing."""
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers = [console]

    if env == "test":
        return handlers

    directory = Path(log_dir or os.getenv("LOG_DIR", "logs"))
    directory.mkdir(parents=True, exist_ok=True)
    handlers.append(_rotating_handler(directory / "storefront.log", level))
    handlers.append(_rotating_handler(directory / "storefront_error.log", logging.ERROR))
    return handlers


def build_processors(env: str) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if env in _JSON_ENVIRONMENTS:
        # Tracebacks become structured fields; locals never leave the process
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(
                    show_locals=env == "development",
                    max_frames=4,
                ),
            ),
        ]
    return processors


def configure_logging(log_dir: str | None = None) -> None:
    env = resolve_environment()
    level = get_log_level(env)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = build_handlers(env, level, log_dir)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(env),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def add_context(**kwargs: Any) -> None:
    """Bind request-scoped values (path, customer id) onto every log line."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
