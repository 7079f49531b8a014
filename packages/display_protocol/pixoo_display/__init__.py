"""Display protocol package for Pixoo-style HTTP pixel displays."""

from .errors import (
    ConfigurationError,
    DeviceConnectionError,
    InterruptedPlayback,
    PixooError,
    ProtocolError,
    ResourceError,
)
from .models import (
    Channel,
    CommandResult,
    DeviceInfo,
    ProtocolState,
    SendStats,
    StoredFileType,
    TextScrollDirection,
)
from .protocol import (
    DEFAULT_REFRESH_LIMIT,
    VALID_SIZES,
    PixooCommand,
    PixooProtocol,
    build_envelope,
    encode_pic_data,
)
from .replay import ReplayEvent, ReplayReport, ReplayRunner
from .reporting import ErrorReporter
from .transport import HttpTransport, SimulatedTransport, discover_devices

__all__ = [
    "Channel",
    "CommandResult",
    "ConfigurationError",
    "DEFAULT_REFRESH_LIMIT",
    "DeviceConnectionError",
    "DeviceInfo",
    "ErrorReporter",
    "HttpTransport",
    "InterruptedPlayback",
    "PixooCommand",
    "PixooError",
    "PixooProtocol",
    "ProtocolError",
    "ProtocolState",
    "ReplayEvent",
    "ReplayReport",
    "ReplayRunner",
    "ResourceError",
    "SendStats",
    "SimulatedTransport",
    "StoredFileType",
    "TextScrollDirection",
    "VALID_SIZES",
    "build_envelope",
    "discover_devices",
    "encode_pic_data",
]
