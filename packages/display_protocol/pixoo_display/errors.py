"""Error taxonomy shared by the protocol client, renderer, and session layers."""

from __future__ import annotations

from typing import Any


class PixooError(Exception):
    """Base class for every error raised or reported by this stack."""


class ConfigurationError(PixooError, ValueError):
    """Invalid construction parameters. Always propagated to the caller."""


class DeviceConnectionError(PixooError, ConnectionError):
    """Device unreachable or answered with a non-success HTTP status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ProtocolError(PixooError):
    """Well-formed exchange whose response carries a non-zero error_code."""

    def __init__(self, message: str, error_code: int | None = None, response: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.response = response


class ResourceError(PixooError, FileNotFoundError):
    """Local image/animation source missing or unreadable."""


class InterruptedPlayback(PixooError):
    """An inter-frame wait was cancelled; already-sent frames stand."""
