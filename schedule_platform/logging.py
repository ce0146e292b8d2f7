"""Logging setup using Loguru.

Log lines carry the id of the HTTP request being served and, once the caller
is authenticated, their user id. Both live in context variables so they follow
the request through sync and async code alike.

Example:
    >>> from schedule_platform.logging import logger, setup_logging
    >>> setup_logging(level="DEBUG")
    >>> logger.info("Server starting")
"""

import json
import sys
import traceback
from contextvars import ContextVar
from typing import Any

from loguru import logger

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_var: ContextVar[int | None] = ContextVar("user_id", default=None)


def serialize(record: dict[str, Any]) -> str:
    """Render a log record as a single JSON object."""
    subset = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["module"],
        "function": record["function"],
        "line": record["line"],
    }

    if request_id := request_id_var.get():
        subset["request_id"] = request_id
    if user_id := user_id_var.get():
        subset["user_id"] = user_id

    subset.update(record["extra"])

    if exc := record["exception"]:
        subset["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value),
            "traceback": traceback.format_exception(exc.type, exc.value, exc.traceback),
        }

    return json.dumps(subset, default=str)


def patching(record: dict[str, Any]) -> None:
    record["extra"]["serialized"] = serialize(record)
    record["extra"].setdefault("request_id", request_id_var.get() or "-")


def setup_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Replace Loguru's default sink with one stdout sink.

    Args:
        level: Minimum log level
        json_logs: Emit one JSON object per line instead of colored text
    """
    logger.remove()
    logger.configure(patcher=patching)

    if json_logs:
        logger.add(sys.stdout, level=level, format="{extra[serialized]}")
    else:
        logger.add(
            sys.stdout,
            level=level,
            format=(
                "<green>{time:HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<magenta>{extra[request_id]}</magenta> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
            ),
            colorize=True,
        )


def set_request_context(request_id: str | None = None, user_id: int | None = None) -> None:
    """Attach request metadata to every log line emitted in this context."""
    if request_id is not None:
        request_id_var.set(request_id)
    if user_id is not None:
        user_id_var.set(user_id)


def clear_request_context() -> None:
    request_id_var.set(None)
    user_id_var.set(None)


__all__ = [
    "logger",
    "request_id_var",
    "user_id_var",
    "set_request_context",
    "clear_request_context",
    "setup_logging",
]
