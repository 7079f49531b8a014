"""Core services: device session, animation playback, settings, logging and diagnostics."""

from .animation import AnimationEncoder, FrameScheduler, PlaybackResult
from .config import AppConfig, load_config, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload
from .session import PixooSession, SessionStatus

__all__ = [
    "AnimationEncoder",
    "AppConfig",
    "DiagnosticsExporter",
    "FrameScheduler",
    "PixooSession",
    "PlaybackResult",
    "SessionStatus",
    "build_doctor_payload",
    "load_config",
    "save_config",
]
