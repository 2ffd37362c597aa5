from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

from loguru import logger as _logger

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_REQUEST_ID: ContextVar[str] = ContextVar("request_id", default="-")


class _InterceptHandler(logging.Handler):
    """Route stdlib logging (uvicorn, fastapi) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)
        _logger.opt(depth=6, exception=record.exc_info).log(
            level,
            record.getMessage(),
            request_id=_REQUEST_ID.get(),
        )


class ContextualLogger:
    """Proxy for loguru that binds the current request id on every call."""

    def __getattr__(self, name):
        bound = _logger.bind(request_id=_REQUEST_ID.get())
        return getattr(bound, name)


def set_request_id(value: str | None) -> None:
    _REQUEST_ID.set(value or "-")


def get_request_id() -> str:
    return _REQUEST_ID.get()


def clear_request_id() -> None:
    _REQUEST_ID.set("-")


def setup_logging(level: str = "INFO") -> None:
    _logger.remove()
    _logger.configure(extra={"request_id": "-"})
    _logger.add(
        sys.stderr,
        level=level.upper(),
        format=_FMT,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        std = logging.getLogger(name)
        std.handlers = [_InterceptHandler()]
        std.propagate = False


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
]
