"""loguru sinks, stdlib bridging and per-request correlation ids."""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING

from loguru import logger as _loguru

from .sensitive_filter import sanitize_record

if TYPE_CHECKING:
    from tasksapp.shared.config import LoggingConfig

LINE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

NO_CORRELATION = "-"

# Libraries whose chatter is capped when routed through loguru
_QUIET_LOGGERS = {
    "werkzeug": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default=NO_CORRELATION)


class ContextualLogger:
    """loguru facade; every call is bound to the current correlation id."""

    def __getattr__(self, name):
        return getattr(_loguru.bind(correlation_id=_correlation_id.get()), name)


class _StdlibBridge(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _loguru.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _loguru.bind(correlation_id=_correlation_id.get()).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())


def set_correlation_id(value: str | None) -> None:
    _correlation_id.set(value or NO_CORRELATION)


def clear_correlation_id() -> None:
    _correlation_id.set(NO_CORRELATION)


def resolve_level(config: LoggingConfig, *, debug_mode: bool = False) -> str:
    if config.level:
        return config.level
    return "DEBUG" if debug_mode else "INFO"


def setup_logging(config: LoggingConfig, *, debug_mode: bool = False) -> None:
    """Replace every sink with stderr plus a rotating file, both redacted.

    The file sink is queued, so call ``logger.complete()`` before reading it.
    """
    level = resolve_level(config, debug_mode=debug_mode)
    config.file.parent.mkdir(parents=True, exist_ok=True)

    _loguru.remove()
    _loguru.configure(extra={"correlation_id": NO_CORRELATION})
    _loguru.add(
        sys.stderr,
        level=level,
        format=LINE_FORMAT,
        filter=sanitize_record,
        backtrace=False,
        diagnose=False,
    )
    _loguru.add(
        config.file,
        level=level,
        format=LINE_FORMAT,
        filter=sanitize_record,
        serialize=config.serialize,
        rotation=config.rotation,
        retention=config.retention,
        backtrace=False,
        diagnose=False,
        enqueue=True,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name, cap in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)


logger = ContextualLogger()

__all__ = [
    "NO_CORRELATION",
    "clear_correlation_id",
    "logger",
    "resolve_level",
    "set_correlation_id",
    "setup_logging",
]
