"""JSON-over-HTTP command protocol with picture-id counter management."""

from __future__ import annotations

import base64
import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from .errors import ConfigurationError, PixooError, ProtocolError
from .models import (
    Channel,
    CommandResult,
    ProtocolState,
    SendStats,
    StoredFileType,
    TextScrollDirection,
)
from .reporting import ErrorReporter

logger = logging.getLogger("pixoo.protocol")

VALID_SIZES = (16, 32, 64)
DEFAULT_REFRESH_LIMIT = 32
SINGLE_FRAME_SPEED_MS = 1000
FAILED_SESSION_COUNTER = 0
MAX_TEXT_ID = 19


class PixooCommand(str, Enum):
    SEND_GIF = "Draw/SendHttpGif"
    GET_GIF_ID = "Draw/GetHttpGifId"
    RESET_GIF_ID = "Draw/ResetHttpGifId"
    SEND_TEXT = "Draw/SendHttpText"
    SET_BRIGHTNESS = "Channel/SetBrightness"
    SET_CHANNEL = "Channel/SetIndex"
    SET_CLOCK = "Channel/SetClockSelectId"
    SET_SCREEN = "Channel/OnOffScreen"
    GET_ALL_CONF = "Channel/GetAllConf"
    SET_EQ_POSITION = "Channel/SetEqPosition"
    GET_DEVICE_TIME = "Device/GetDeviceTime"
    PLAY_TF_GIF = "Device/PlayTFGif"
    REBOOT = "Device/SysReboot"
    SET_HIGHLIGHT_MODE = "Device/SetHighLightMode"
    SET_MIRROR_MODE = "Device/SetMirrorMode"
    SET_NOISE_STATUS = "Device/SetNoiseStatus"
    SET_WHITE_BALANCE = "Device/SetWhiteBalance"
    PLAY_BUZZER = "Device/PlayBuzzer"
    SET_SCOREBOARD = "Tools/SetScoreBoard"


def build_envelope(command: PixooCommand | str, **fields: Any) -> dict[str, Any]:
    """Return a new command document; ``Command`` is always the first key."""
    envelope: dict[str, Any] = {"Command": PixooCommand(command).value}
    envelope.update(fields)
    return envelope


def encode_pic_data(values: bytes | bytearray | memoryview | Iterable[int]) -> str:
    if isinstance(values, (bytes, bytearray, memoryview)):
        raw = bytes(values)
    else:
        raw = bytes(max(0, min(255, int(v))) for v in values)
    return base64.b64encode(raw).decode("ascii")


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, int(value)))


def _error_code(response: dict[str, Any]) -> int | None:
    try:
        return int(response["error_code"])
    except (KeyError, TypeError, ValueError):
        return None


def _loggable(envelope: dict[str, Any]) -> dict[str, Any]:
    if "PicData" not in envelope:
        return envelope
    out = dict(envelope)
    out["PicData"] = f"<{len(envelope['PicData'])} chars>"
    return out


class PixooProtocol:
    """Session-scoped client: envelopes, counter/reset protocol, response classification."""

    def __init__(
        self,
        transport: Any,
        size: int = 64,
        refresh_limit: int = DEFAULT_REFRESH_LIMIT,
        refresh_automatically: bool = True,
        reporter: ErrorReporter | None = None,
    ) -> None:
        if size not in VALID_SIZES:
            raise ConfigurationError(f"Invalid screen size {size}; valid options are 16, 32 and 64")
        if refresh_limit < 2:
            raise ConfigurationError(f"Refresh limit must be at least 2, got {refresh_limit}")
        self.transport = transport
        self.size = size
        self.refresh_limit = refresh_limit
        self.refresh_automatically = refresh_automatically
        self.reporter = reporter or ErrorReporter()
        self.state = ProtocolState.DISCONNECTED
        self.counter = FAILED_SESSION_COUNTER
        self.stats = SendStats()

    @property
    def simulated(self) -> bool:
        return bool(getattr(self.transport, "simulated", False))

    @property
    def frames_sent(self) -> int:
        return self.stats.frames_sent

    def execute(self, command: PixooCommand | str, **fields: Any) -> CommandResult:
        envelope = build_envelope(command, **fields)
        name = envelope["Command"]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"request {_loggable(envelope)}")
        try:
            response = self.transport.post(envelope)
            logger.debug(f"response {response}")
            code = _error_code(response)
            if code is None:
                raise ProtocolError(f"{name} response has no usable error_code", response=response)
            if code != 0:
                raise ProtocolError(f"{name} failed with error_code {code}", error_code=code, response=response)
        except PixooError as exc:
            self.stats.errors += 1
            self.reporter.report(exc, envelope)
            response = exc.response if isinstance(exc, ProtocolError) else None
            return CommandResult(command=name, success=False, response=response, error=exc)
        return CommandResult(command=name, success=True, response=response)

    # Session lifecycle

    def connect(self) -> CommandResult | None:
        if self.simulated:
            self.counter = 1
            self.state = ProtocolState.SIMULATED
            self.reporter.record("connect_simulated", counter=self.counter)
            return None

        self.state = ProtocolState.CONNECTING
        result = self.execute(PixooCommand.GET_ALL_CONF)
        if not result.success:
            self.counter = FAILED_SESSION_COUNTER
            self.state = ProtocolState.DEGRADED
            logger.error(
                "No connection could be made; verify the device address",
                extra={"event": "connect_failed"},
            )
            return result

        self.state = ProtocolState.READY
        self.reporter.record("connect_ok")
        self.load_counter()
        if self.refresh_automatically and self.counter > self.refresh_limit:
            self.reset_counter()
            self.counter = FAILED_SESSION_COUNTER
        return result

    def load_counter(self) -> CommandResult:
        result = self.execute(PixooCommand.GET_GIF_ID)
        if not result.success:
            return result
        try:
            self.counter = int(result.response["PicId"])
        except (KeyError, TypeError, ValueError):
            exc = ProtocolError("GetHttpGifId response has no PicId", response=result.response)
            self.reporter.report(exc, {"Command": result.command})
            return CommandResult(command=result.command, success=False, response=result.response, error=exc)
        logger.debug(f"counter loaded: {self.counter}")
        self.reporter.record("counter_loaded", counter=self.counter)
        return result

    def reset_counter(self) -> CommandResult:
        logger.debug("resetting picture id remotely")
        result = self.execute(PixooCommand.RESET_GIF_ID)
        if result.success:
            self.stats.resets += 1
            self.reporter.record("counter_reset", counter=self.counter)
        return result

    # Frames

    def _check_frame(self, rgb: bytes) -> None:
        expected = self.size * self.size * 3
        if len(rgb) != expected:
            raise ValueError(f"Frame size must be {expected} bytes, got {len(rgb)}")

    def send_frame(self, rgb: bytes) -> CommandResult:
        """Push one full frame under the ever-incrementing session counter."""
        self._check_frame(rgb)
        self.counter += 1
        if self.refresh_automatically and self.counter > self.refresh_limit:
            self.reset_counter()
            self.counter = 1
        logger.debug(f"counter set to {self.counter}", extra={"event": "counter_advanced", "pic_id": self.counter})

        result = self.execute(
            PixooCommand.SEND_GIF,
            PicNum=1,
            PicWidth=self.size,
            PicOffset=0,
            PicID=self.counter,
            PicSpeed=SINGLE_FRAME_SPEED_MS,
            PicData=encode_pic_data(rgb),
        )
        if result.success:
            self._count_frame(rgb, pic_id=self.counter)
        return result

    def send_animation_frame(
        self,
        rgb: bytes,
        frame_count: int,
        offset: int,
        pic_id: int,
        speed_ms: int,
    ) -> CommandResult:
        """Push one frame of a multi-frame picture sharing a single ``PicID``."""
        self._check_frame(rgb)
        result = self.execute(
            PixooCommand.SEND_GIF,
            PicNum=frame_count,
            PicWidth=self.size,
            PicOffset=offset,
            PicID=pic_id,
            PicSpeed=int(speed_ms),
            PicData=encode_pic_data(rgb),
        )
        if result.success:
            self._count_frame(rgb, pic_id=pic_id, offset=offset)
        return result

    def _count_frame(self, rgb: bytes, **fields: Any) -> None:
        self.stats.frames_sent += 1
        self.stats.bytes_sent += len(rgb)
        self.reporter.record("frame_sent", frames_sent=self.stats.frames_sent, **fields)

    # Read operations

    def get_all_device_configurations(self) -> dict[str, Any] | None:
        result = self.execute(PixooCommand.GET_ALL_CONF)
        return result.response if result.success else None

    def get_device_time(self) -> dict[str, Any] | None:
        result = self.execute(PixooCommand.GET_DEVICE_TIME)
        return result.response if result.success else None

    # Device controls

    def send_text(
        self,
        text: str,
        x: int = 0,
        y: int = 0,
        color_hex: str = "#FFFFFF",
        identifier: int = 1,
        font: int = 2,
        width: int = 64,
        movement_speed: int = 1,
        direction: TextScrollDirection = TextScrollDirection.LEFT,
    ) -> CommandResult:
        return self.execute(
            PixooCommand.SEND_TEXT,
            TextId=_clamp(identifier, 0, MAX_TEXT_ID),
            x=x,
            y=y,
            dir=int(direction),
            font=font,
            TextWidth=width,
            speed=movement_speed,
            TextString=text,
            color=color_hex,
        )

    def set_brightness(self, brightness: int) -> CommandResult:
        return self.execute(PixooCommand.SET_BRIGHTNESS, Brightness=_clamp(brightness, 0, 100))

    def set_channel(self, channel: Channel | int) -> CommandResult:
        return self.execute(PixooCommand.SET_CHANNEL, SelectIndex=int(channel))

    def set_clock(self, clock_id: int) -> CommandResult:
        return self.execute(PixooCommand.SET_CLOCK, ClockId=clock_id)

    def set_screen(self, on: bool) -> CommandResult:
        return self.execute(PixooCommand.SET_SCREEN, OnOff=1 if on else 0)

    def play_local_gif(self, file_name: str) -> CommandResult:
        return self.execute(PixooCommand.PLAY_TF_GIF, FileType=int(StoredFileType.LOCAL), FileName=file_name)

    def play_net_gif(self, url: str) -> CommandResult:
        return self.execute(PixooCommand.PLAY_TF_GIF, FileType=int(StoredFileType.NETWORK), FileName=url)

    def reboot(self) -> CommandResult:
        return self.execute(PixooCommand.REBOOT)

    def set_highlight_mode(self, on: bool) -> CommandResult:
        return self.execute(PixooCommand.SET_HIGHLIGHT_MODE, Mode=bool(on))

    def set_mirror_mode(self, on: bool) -> CommandResult:
        return self.execute(PixooCommand.SET_MIRROR_MODE, Mode=bool(on))

    def set_noise_status(self, on: bool) -> CommandResult:
        return self.execute(PixooCommand.SET_NOISE_STATUS, NoiseStatus=bool(on))

    def set_scoreboard(self, blue_score: int, red_score: int) -> CommandResult:
        return self.execute(PixooCommand.SET_SCOREBOARD, BlueScore=blue_score, RedScore=red_score)

    def set_visualizer(self, equalizer_position: int) -> CommandResult:
        return self.execute(PixooCommand.SET_EQ_POSITION, EqPosition=equalizer_position)

    def set_white_balance(self, r: int, g: int, b: int) -> CommandResult:
        return self.execute(
            PixooCommand.SET_WHITE_BALANCE,
            RValue=_clamp(r, 0, 100),
            GValue=_clamp(g, 0, 100),
            BValue=_clamp(b, 0, 100),
        )

    def sound_buzzer(self, active_cycle_ms: int, inactive_cycle_ms: int, total_ms: int) -> CommandResult:
        return self.execute(
            PixooCommand.PLAY_BUZZER,
            ActiveTimeInCycle=active_cycle_ms,
            OffTimeInCycle=inactive_cycle_ms,
            PlayTotalTime=total_ms,
        )
