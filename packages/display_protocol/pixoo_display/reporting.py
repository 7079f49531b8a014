"""Diagnostic sink for protocol failures and session events."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from .errors import PixooError, ProtocolError

_MAX_EVENTS = 1000


class ErrorReporter:
    """Logs failures and keeps a bounded ring of recent events.

    Reporting is a side effect only: nothing here raises or changes what the
    caller does next.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("pixoo.protocol")
        self._events: list[dict[str, Any]] = []

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        return self._events[-limit:]

    def record(self, event: str, **fields: Any) -> None:
        row: dict[str, Any] = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
        }
        row.update(fields)
        self._events.append(row)
        if len(self._events) > _MAX_EVENTS:
            self._events = self._events[-_MAX_EVENTS:]

    def report(self, error: PixooError, envelope: dict[str, Any] | None = None) -> None:
        command = envelope.get("Command") if envelope else None
        error_code = error.error_code if isinstance(error, ProtocolError) else None
        self.record(
            "command_error",
            command=command,
            error=str(error),
            error_type=type(error).__name__,
            error_code=error_code,
        )
        self.logger.warning(
            f"{type(error).__name__} on {command or 'request'}: {error}",
            extra={"event": "command_error", "command": command, "error_code": error_code},
        )
