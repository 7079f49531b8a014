"""Device session: one canvas plus the protocol client that pushes it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image

from pixoo_display import (
    Channel,
    CommandResult,
    DEFAULT_REFRESH_LIMIT,
    ConfigurationError,
    ErrorReporter,
    HttpTransport,
    PixooProtocol,
    ProtocolState,
    ResourceError,
    SimulatedTransport,
    TextScrollDirection,
)
from pixoo_renderer import Color, FrameBuffer, ImageCompositor, Palette, Rasterizer, ResampleMode

from .config import AppConfig

logger = logging.getLogger("pixoo.session")


@dataclass
class SessionStatus:
    state: ProtocolState = ProtocolState.DISCONNECTED
    address: str | None = None
    size: int = 64
    counter: int = 0
    frames_sent: int = 0
    resets: int = 0
    errors: int = 0
    simulated: bool = False


class PixooSession:
    """Owns the FrameBuffer and the protocol state for one display.

    Construction validates the size and connects immediately. A device that
    does not answer leaves the session DEGRADED rather than raising.
    """

    def __init__(
        self,
        size: int = 64,
        address: str | None = None,
        simulated: bool = False,
        refresh_automatically: bool = True,
        refresh_limit: int = DEFAULT_REFRESH_LIMIT,
        timeout_s: float = 5.0,
        transport: Any = None,
        reporter: ErrorReporter | None = None,
        connect: bool = True,
    ) -> None:
        self.buffer = FrameBuffer(size)
        if transport is None:
            if simulated:
                transport = SimulatedTransport()
            elif not address:
                raise ConfigurationError("A device address is required unless simulating")
            else:
                transport = HttpTransport(address, timeout_s=timeout_s)
        self.address = address
        self.protocol = PixooProtocol(
            transport,
            size=size,
            refresh_limit=refresh_limit,
            refresh_automatically=refresh_automatically,
            reporter=reporter,
        )
        self.rasterizer = Rasterizer(self.buffer)
        self.compositor = ImageCompositor(self.buffer)
        if connect:
            self.connect()

    @classmethod
    def from_config(cls, cfg: AppConfig, transport: Any = None, connect: bool = True) -> PixooSession:
        return cls(
            size=int(cfg.device.size),
            address=cfg.device.address,
            simulated=cfg.device.simulated,
            refresh_automatically=cfg.device.refresh_automatically,
            refresh_limit=cfg.device.refresh_limit,
            timeout_s=cfg.device.timeout_s,
            transport=transport,
            connect=connect,
        )

    @property
    def size(self) -> int:
        return self.buffer.size

    @property
    def transport(self) -> Any:
        return self.protocol.transport

    @property
    def reporter(self) -> ErrorReporter:
        return self.protocol.reporter

    @property
    def state(self) -> ProtocolState:
        return self.protocol.state

    @property
    def counter(self) -> int:
        return self.protocol.counter

    @property
    def frames_sent(self) -> int:
        return self.protocol.frames_sent

    @property
    def simulated(self) -> bool:
        return self.protocol.simulated

    def status(self) -> SessionStatus:
        stats = self.protocol.stats
        return SessionStatus(
            state=self.state,
            address=self.address,
            size=self.size,
            counter=self.counter,
            frames_sent=stats.frames_sent,
            resets=stats.resets,
            errors=stats.errors,
            simulated=self.simulated,
        )

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        return self.reporter.recent_events(limit)

    def connect(self) -> CommandResult | None:
        result = self.protocol.connect()
        logger.info(
            f"session {self.state.value} size={self.size} counter={self.counter}",
            extra={"event": "session_connect", "state": self.state.value, "counter": self.counter},
        )
        return result

    def save_transcript(self, path: Path) -> Path | None:
        if not isinstance(self.transport, SimulatedTransport):
            return None
        return self.transport.save_transcript(path)

    # Drawing

    def fill(self, color: Color) -> None:
        self.buffer.fill(color)

    def clear(self) -> None:
        self.buffer.clear()

    def draw_pixel(self, x: int, y: int, color: Color) -> None:
        self.buffer.set_pixel(x, y, color)

    def draw_pixel_at_index(self, index: int, color: Color) -> None:
        self.buffer.set_pixel_by_index(index, color)

    def draw_line(self, x1: int, y1: int, x2: int, y2: int, color: Color) -> None:
        self.rasterizer.draw_line(x1, y1, x2, y2, color)

    def draw_filled_rect(self, x: int, y: int, width: int, height: int, color: Color) -> None:
        self.rasterizer.draw_filled_rect(x, y, width, height, color)

    def draw_character(self, character: str, x: int, y: int, color: Color = Palette.WHITE) -> None:
        self.rasterizer.draw_character(character, x, y, color)

    def draw_text(self, text: str, x: int, y: int, color: Color = Palette.WHITE) -> None:
        self.rasterizer.draw_text(text, x, y, color)

    def draw_image(
        self,
        source: Image.Image | str | Path,
        x: int = 0,
        y: int = 0,
        mode: ResampleMode = ResampleMode.SMOOTH,
        pad: bool = False,
    ) -> bool:
        """Composite an image onto the canvas; a missing file is reported and leaves the canvas untouched."""
        try:
            self.compositor.draw_image(source, x=x, y=y, mode=mode, pad=pad)
        except ResourceError as exc:
            self.reporter.report(exc)
            return False
        return True

    def push(self) -> CommandResult:
        return self.protocol.send_frame(self.buffer.to_bytes())

    # Device controls

    def reset_counter(self) -> CommandResult:
        return self.protocol.reset_counter()

    def load_counter(self) -> CommandResult:
        return self.protocol.load_counter()

    def get_all_device_configurations(self) -> dict[str, Any] | None:
        return self.protocol.get_all_device_configurations()

    def get_device_time(self) -> dict[str, Any] | None:
        return self.protocol.get_device_time()

    def send_text(
        self,
        text: str,
        x: int = 0,
        y: int = 0,
        color: Color = Palette.WHITE,
        identifier: int = 1,
        font: int = 2,
        width: int = 64,
        movement_speed: int = 1,
        direction: TextScrollDirection = TextScrollDirection.LEFT,
    ) -> CommandResult:
        return self.protocol.send_text(
            text,
            x=x,
            y=y,
            color_hex=color.hex,
            identifier=identifier,
            font=font,
            width=width,
            movement_speed=movement_speed,
            direction=direction,
        )

    def set_brightness(self, brightness: int) -> CommandResult:
        return self.protocol.set_brightness(brightness)

    def set_channel(self, channel: Channel | int) -> CommandResult:
        return self.protocol.set_channel(channel)

    def set_clock(self, clock_id: int) -> CommandResult:
        return self.protocol.set_clock(clock_id)

    def set_screen(self, on: bool) -> CommandResult:
        return self.protocol.set_screen(on)

    def play_local_gif(self, file_name: str) -> CommandResult:
        return self.protocol.play_local_gif(file_name)

    def play_net_gif(self, url: str) -> CommandResult:
        return self.protocol.play_net_gif(url)

    def reboot(self) -> CommandResult:
        return self.protocol.reboot()

    def set_highlight_mode(self, on: bool) -> CommandResult:
        return self.protocol.set_highlight_mode(on)

    def set_mirror_mode(self, on: bool) -> CommandResult:
        return self.protocol.set_mirror_mode(on)

    def set_noise_status(self, on: bool) -> CommandResult:
        return self.protocol.set_noise_status(on)

    def set_scoreboard(self, blue_score: int, red_score: int) -> CommandResult:
        return self.protocol.set_scoreboard(blue_score, red_score)

    def set_visualizer(self, equalizer_position: int) -> CommandResult:
        return self.protocol.set_visualizer(equalizer_position)

    def set_white_balance(self, r: int, g: int, b: int) -> CommandResult:
        return self.protocol.set_white_balance(r, g, b)

    def sound_buzzer(self, active_cycle_ms: int, inactive_cycle_ms: int, total_ms: int) -> CommandResult:
        return self.protocol.sound_buzzer(active_cycle_ms, inactive_cycle_ms, total_ms)
