"""
Logging.

structlog on top of stdlib logging, configured from
config/settings/logging.yaml. Every module gets its logger from get_logger();
entry points call setup_logging() once and bind their source with
bind_source().

JSON records carry: timestamp, level, logger, event, func_name, lineno and
source (cli, shell, session, store, internal; anything else is logged as
unknown).

Usage:
    from notekeeper.backend.core.logging import bind_source, get_logger, setup_logging

    setup_logging(level="DEBUG", format_type="console")
    bind_source("shell")

    logger = get_logger(__name__)
    logger.info("Note saved", extra={"note_id": 3})
    log_with_source(logger, "session", "info", "Undo buffer replaced", dropped_note_id=2)

Log File:
    logs/system.jsonl when the file handler is enabled; rotated by size
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from notekeeper.backend.core.config import find_project_root, load_yaml_config

VALID_SOURCES = frozenset({
    "cli",
    "shell",
    "session",
    "store",
    "internal",
    "unknown",
})

_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """
    Read logging.yaml once and keep it for later calls.

    Raises:
        FileNotFoundError: If logging.yaml does not exist
    """
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def normalize_source(source: str) -> str:
    """Return source if it is recognized, otherwise "unknown"."""
    return source if source in VALID_SOURCES else "unknown"


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, processors: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)


def _console_handler(format_type: str, processors: list[Processor]) -> logging.Handler:
    # stderr keeps log lines out of command output
    handler = logging.StreamHandler(sys.stderr)
    if format_type == "console":
        handler.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=True), processors))
    else:
        handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), processors))
    return handler


def _file_handler(file_config: dict[str, Any], processors: list[Processor]) -> logging.Handler:
    log_path = _resolve_log_path(file_config["path"])
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config["max_bytes"],
        backupCount=file_config["backup_count"],
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), processors))
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Arguments left as None fall back to logging.yaml. Calling this again
    replaces the root handlers, so entry points and tests can reconfigure.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console' for the console handler; the file is always JSON
        enable_console: Write records to stderr
        enable_file_logging: Write records to the rotating JSONL file
    """
    config = _load_logging_config()
    handlers_config = config["handlers"]

    level = level if level is not None else config["level"]
    format_type = format_type if format_type is not None else config["format"]
    if enable_console is None:
        enable_console = handlers_config["console"]["enabled"]
    if enable_file_logging is None:
        enable_file_logging = handlers_config["file"]["enabled"]

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        root_logger.addHandler(_console_handler(format_type, processors))
    if enable_file_logging:
        root_logger.addHandler(_file_handler(handlers_config["file"], processors))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Logger for a module; pass __name__."""
    return structlog.get_logger(name)


def bind_source(source: str) -> None:
    """Tag every record from this context (task, thread) with source."""
    structlog.contextvars.bind_contextvars(source=normalize_source(source))


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log one record with an explicit source.

    Raises:
        AttributeError: If level is not a log level method of logger

    Example:
        log_with_source(logger, "session", "info", "Note deleted", note_id=3)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=normalize_source(source), **kwargs)
