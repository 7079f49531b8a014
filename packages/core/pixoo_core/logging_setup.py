"""Structured local logging setup."""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import platform
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


_LOGGER_NAME = "pixoo"
# Optional record attributes copied into the JSON line when a call site sets them.
_CONTEXT_FIELDS = ("event", "command", "error_code", "pic_id", "counter", "state")


def _config_root() -> Path:
    if platform.system() == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "Pixoo"
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Pixoo"
    return Path.home() / ".config" / "pixoo"


def log_dir() -> Path:
    path = _config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        for key in _CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        return json.dumps(payload, ensure_ascii=True, default=str)


class ConsoleFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        command = getattr(record, "command", None)
        if command:
            line = f"{line} [{command}]"
        return line


def configure_logging(keep_files: int = 7, console: bool = True, debug: bool = False) -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    level = logging.DEBUG if debug else logging.INFO
    if logger.handlers:
        logger.setLevel(level)
        return logger

    logger.setLevel(level)
    path = log_dir() / "pixoo.log"
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(ConsoleFormatter())
        logger.addHandler(stream_handler)

    logger.info("logging configured", extra={"event": "logging_configured"})
    return logger

