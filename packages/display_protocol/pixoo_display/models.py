"""Typed models for device transport and protocol state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

from .errors import PixooError


class ProtocolState(str, Enum):
    DISCONNECTED = "Disconnected"
    CONNECTING = "Connecting"
    READY = "Ready"
    DEGRADED = "Degraded"
    SIMULATED = "Simulated"


class Channel(IntEnum):
    FACES = 0
    CLOUD = 1
    VISUALIZER = 2
    CUSTOM = 3


class TextScrollDirection(IntEnum):
    LEFT = 0
    RIGHT = 1


class StoredFileType(IntEnum):
    LOCAL = 0
    NETWORK = 2


@dataclass(frozen=True)
class DeviceInfo:
    address: str
    name: str
    mac: str | None = None


@dataclass(frozen=True)
class CommandResult:
    command: str
    success: bool
    response: dict[str, Any] | None = None
    error: PixooError | None = None

    @property
    def error_code(self) -> int | None:
        if self.response is None:
            return None
        code = self.response.get("error_code")
        return int(code) if code is not None else None


@dataclass
class SendStats:
    frames_sent: int = 0
    bytes_sent: int = 0
    resets: int = 0
    errors: int = 0
