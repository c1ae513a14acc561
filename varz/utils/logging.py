"""VARZ logging utilities.

Every subsystem logs through the standard library so the assistant can emit
JSON records to a rotating file while still rendering readable, colourful
output on the console through Rich. Spoken utterances, recognised transcripts
and dispatch decisions are all logged with structured ``extra`` fields.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


class JsonFormatter(logging.Formatter):
    """Format log records as JSON documents.

    The formatter keeps the record lean while exposing the timestamp, severity
    and logger name, plus the request-scoped fields the voice assistant attaches
    (``intent``, ``template_id``, ``command_id``).
    """

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    context_fields = ("intent", "template_id", "command_id", "language", "session_state")

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                self.default_time_format
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)
        for key in self.context_fields:
            if key in record.__dict__:
                payload[key] = record.__dict__[key]
        return json.dumps(payload, ensure_ascii=False)


def _build_handlers(log_dir: Path, enable_rich: bool) -> Dict[str, Dict[str, Any]]:
    handlers: Dict[str, Dict[str, Any]] = {
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filename": str(log_dir / "varz.log"),
            "maxBytes": 2 * 1024 * 1024,
            "backupCount": 3,
        }
    }
    if enable_rich:
        handlers["console"] = {
            "class": "rich.logging.RichHandler",
            "formatter": "rich",
            "level": "WARNING",
            "rich_tracebacks": True,
            "show_path": False,
        }
    else:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "level": "WARNING",
        }
    return handlers


def configure_logging(*, level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configure global logging for the assistant.

    Parameters
    ----------
    level:
        Minimum severity written to the JSON log file.
    log_dir:
        Directory for the rotating log file. Defaults to ``$VARZ_LOG_DIR`` or
        ``~/.varz/logs``.

    Calling the function again replaces the previous handlers, so tests and the
    CLI can reconfigure freely.
    """

    log_dir = log_dir or Path(os.environ.get("VARZ_LOG_DIR", Path.home() / ".varz" / "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    enable_rich = os.environ.get("VARZ_RICH", "1") != "0"
    handlers = _build_handlers(log_dir, enable_rich)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "varz.utils.logging.JsonFormatter",
            },
            "rich": {
                "format": "%(message)s",
                "datefmt": "%H:%M:%S",
            },
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": list(handlers.keys()),
        },
    }

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """Return the module logger; configuration is applied once by the CLI."""

    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
