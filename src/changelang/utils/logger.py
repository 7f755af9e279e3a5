"""Structured logging for changelang.

stdout belongs to the track listings, prompts and ffmpeg command lines, so
log records only ever go to stderr and, optionally, a log file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog

from changelang.config import LoggingConfig

SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
]


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _handlers(output: Optional[str]) -> list[logging.Handler]:
    """stderr handler, plus a file handler when a log file is configured."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if not output:
        return handlers

    log_path = Path(output)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, mode="a", encoding="utf-8"))
    except OSError as e:
        sys.stderr.write(f"Warning: log file {log_path} unavailable, logging to stderr only: {e}\n")
    return handlers


def setup_logging(config: LoggingConfig) -> None:
    """Configure structlog on top of the stdlib root logger.

    Args:
        config: Logging configuration
    """
    structlog.configure(
        processors=[*SHARED_PROCESSORS, _renderer(config.format)],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=config.level.upper(),
        handlers=_handlers(config.output),
        force=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structured logger, named after the calling module by convention."""
    return structlog.get_logger(name)
