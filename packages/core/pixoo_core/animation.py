"""Multi-frame playback: cumulative device-side animations and paced frame streams."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from pixoo_display import CommandResult, DeviceConnectionError, InterruptedPlayback, ResourceError
from pixoo_renderer import AnimationFrame, ResampleMode, decode_animation, resample

from .session import PixooSession

logger = logging.getLogger("pixoo.animation")

ANIMATION_PIC_ID = 1
DEFAULT_MIN_DELAY_MS = 50
DEFAULT_DIRECTORY_PAUSE_MS = 1000


class FrameScheduler:
    """Blocking inter-frame wait that another thread can cancel."""

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def wait(self, delay_ms: int) -> bool:
        """Block for ``delay_ms``; returns False if playback was cancelled.

        Ctrl-C during the wait cancels playback instead of unwinding the caller.
        """
        if delay_ms > 0:
            try:
                self._cancelled.wait(delay_ms / 1000.0)
            except KeyboardInterrupt:
                self.cancel()
                return False
        return not self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def reset(self) -> None:
        self._cancelled.clear()


@dataclass
class PlaybackResult:
    frames_sent: int = 0
    frames_total: int = 0
    completed: bool = False
    aborted_reason: str | None = None


def _abort_reason(result: CommandResult) -> str:
    if isinstance(result.error, DeviceConnectionError):
        return "connection_error"
    return "protocol_error"


class AnimationEncoder:
    def __init__(
        self,
        session: PixooSession,
        scheduler: FrameScheduler | None = None,
        min_delay_ms: int = DEFAULT_MIN_DELAY_MS,
        directory_pause_ms: int = DEFAULT_DIRECTORY_PAUSE_MS,
        resample_mode: ResampleMode = ResampleMode.SMOOTH,
    ) -> None:
        self.session = session
        self.scheduler = scheduler or FrameScheduler()
        self.min_delay_ms = min_delay_ms
        self.directory_pause_ms = directory_pause_ms
        self.resample_mode = ResampleMode(resample_mode)

    def _load(self, source: list[AnimationFrame] | str | Path) -> list[AnimationFrame] | None:
        if isinstance(source, (str, Path)):
            try:
                return decode_animation(source)
            except ResourceError as exc:
                self.session.reporter.report(exc)
                return None
        return list(source)

    def _interrupted(self, result: PlaybackResult) -> PlaybackResult:
        result.aborted_reason = "interrupted"
        self.session.reporter.report(
            InterruptedPlayback(f"playback cancelled after {result.frames_sent}/{result.frames_total} frames")
        )
        return result

    def send_cumulative(
        self,
        source: list[AnimationFrame] | str | Path,
        speed_ms: int | None = None,
    ) -> PlaybackResult:
        """Upload every frame as one device-side animation.

        Frames are painted over a persistent black canvas without clearing, and
        the composited canvas is what gets sent. The first failed frame ends the
        upload; frames already accepted stay on the device.
        """
        frames = self._load(source)
        if frames is None:
            return PlaybackResult(aborted_reason="resource_error")
        result = PlaybackResult(frames_total=len(frames))
        if not frames:
            result.completed = True
            return result

        session = self.session
        protocol = session.protocol
        if protocol.reset_counter().success:
            protocol.counter = ANIMATION_PIC_ID

        size = session.size
        canvas = Image.new("RGB", (size, size), (0, 0, 0))
        for offset, frame in enumerate(frames):
            image = resample(frame.image, size, self.resample_mode).convert("RGBA")
            canvas.paste(image, (0, 0), image)
            session.draw_image(canvas)

            sent = protocol.send_animation_frame(
                session.buffer.to_bytes(),
                frame_count=len(frames),
                offset=offset,
                pic_id=ANIMATION_PIC_ID,
                speed_ms=speed_ms if speed_ms is not None else frame.delay_ms,
            )
            if not sent.success:
                result.aborted_reason = _abort_reason(sent)
                logger.warning(
                    f"animation upload aborted at frame {offset + 1}/{len(frames)}",
                    extra={
                        "event": "animation_aborted",
                        "command": sent.command,
                        "error_code": getattr(sent.error, "error_code", None),
                    },
                )
                return result
            result.frames_sent += 1

        result.completed = True
        logger.info(f"animation uploaded: {result.frames_sent} frames", extra={"event": "animation_sent"})
        return result

    def play_sequential(
        self,
        source: list[AnimationFrame] | str | Path,
        loops: int = 1,
        min_delay_ms: int | None = None,
    ) -> PlaybackResult:
        """Push frames one at a time through the session counter; ``loops=0`` runs until cancelled."""
        frames = self._load(source)
        if frames is None:
            return PlaybackResult(aborted_reason="resource_error")
        result = PlaybackResult(frames_total=len(frames))
        if not frames:
            result.completed = True
            return result

        floor = self.min_delay_ms if min_delay_ms is None else min_delay_ms
        played = 0
        while loops <= 0 or played < loops:
            for frame in frames:
                self.session.clear()
                self.session.draw_image(frame.image, mode=ResampleMode.PIXEL_ART)
                if self.session.push().success:
                    result.frames_sent += 1
                if not self.scheduler.wait(max(frame.delay_ms, floor)):
                    return self._interrupted(result)
            played += 1

        result.completed = True
        return result

    def play_directory(
        self,
        directory: str | Path,
        pause_ms: int | None = None,
        pattern: str = ".gif",
    ) -> PlaybackResult:
        """Show the first frame of each matching file in name order, pausing between files."""
        directory = Path(directory)
        if not directory.is_dir():
            self.session.reporter.report(ResourceError(f"Directory not found: {directory}"))
            return PlaybackResult(aborted_reason="resource_error")

        files = sorted(p for p in directory.iterdir() if p.is_file() and p.name.lower().endswith(pattern.lower()))
        result = PlaybackResult(frames_total=len(files))
        pause = self.directory_pause_ms if pause_ms is None else pause_ms

        for path in files:
            frames = self._load(path)
            if not frames:
                continue
            self.session.clear()
            self.session.draw_image(frames[0].image, mode=self.resample_mode)
            if self.session.push().success:
                result.frames_sent += 1
            if not self.scheduler.wait(pause):
                return self._interrupted(result)

        result.completed = True
        return result
