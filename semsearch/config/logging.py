"""Logging setup for the semsearch package.

Module loggers are created with ``logging.getLogger(__name__)`` and so sit
under the ``semsearch`` logger. ``setup_logging`` attaches handlers there
and leaves the root logger to the host application.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from ..core.domain.exceptions import SemSearchError

ROOT_LOGGER_NAME = "semsearch"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s | %(message)s"


class JSONExceptionFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Package errors attached to a record keep their error code, kind and
    context; other exceptions are reduced to type and message. Both carry
    the formatted traceback.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "module": record.module,
                "function": record.funcName,
                "line": record.lineno,
            },
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self._describe(record.exc_info[1])
            entry["exception"]["traceback"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)

    @staticmethod
    def _describe(exc: BaseException) -> dict[str, Any]:
        if isinstance(exc, SemSearchError):
            described = exc.to_dict()
            return {
                "type": described["error"]["type"],
                "message": described["error"]["message"],
                "code": described["error"]["code"],
                "kind": described["error"]["kind"],
                "context": described.get("context", {}),
            }
        return {"type": type(exc).__name__, "message": str(exc)}


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _build_handlers(log_file: Path | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    return handlers


def setup_logging(
    level: str | int = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``semsearch`` logger.

    Calling it again replaces the handlers installed by the previous call.
    Unknown level names fall back to INFO.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR) or number.
        log_file: Also write to this file, creating its directory.
        json_format: Emit one JSON object per record.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_resolve_level(level))
    for stale in list(logger.handlers):
        logger.removeHandler(stale)

    formatter = (
        JSONExceptionFormatter() if json_format else logging.Formatter(TEXT_FORMAT, DATE_FORMAT)
    )
    for handler in _build_handlers(log_file):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """The package logger, or its child ``semsearch.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME)
