"""Persistent settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from pixoo_display import DEFAULT_REFRESH_LIMIT


CONFIG_VERSION = 1


@dataclass
class DeviceConfig:
    address: str | None = None
    size: int = 64
    simulated: bool = False
    refresh_automatically: bool = True
    refresh_limit: int = DEFAULT_REFRESH_LIMIT
    timeout_s: float = 5.0


@dataclass
class PlaybackConfig:
    resample_mode: str = "smooth"
    min_frame_delay_ms: int = 50
    directory_pause_ms: int = 1000


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7
    debug: bool = False


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    device: DeviceConfig = field(default_factory=DeviceConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


DEFAULT_CONFIG = AppConfig()


def config_path() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "Pixoo" / "config.json"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Pixoo" / "config.json"
    return Path.home() / ".config" / "pixoo" / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_device(cfg: AppConfig) -> None:
    # size is left alone; session construction rejects invalid values.
    cfg.device.refresh_limit = max(2, int(cfg.device.refresh_limit))
    cfg.device.timeout_s = float(max(0.5, min(60.0, float(cfg.device.timeout_s))))
    if cfg.device.address is not None:
        cfg.device.address = str(cfg.device.address).strip() or None


def _normalize_playback(cfg: AppConfig) -> None:
    if cfg.playback.resample_mode not in ("smooth", "pixel-art"):
        cfg.playback.resample_mode = "smooth"
    cfg.playback.min_frame_delay_ms = max(0, int(cfg.playback.min_frame_delay_ms))
    cfg.playback.directory_pause_ms = max(0, int(cfg.playback.directory_pause_ms))


def _normalize_diagnostics(cfg: AppConfig) -> None:
    cfg.diagnostics.keep_log_files = max(2, int(cfg.diagnostics.keep_log_files))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=int(raw.get("config_version", CONFIG_VERSION)),
        device=_merge(DeviceConfig, raw.get("device", {}) or {}),
        playback=_merge(PlaybackConfig, raw.get("playback", {}) or {}),
        diagnostics=_merge(DiagnosticsConfig, raw.get("diagnostics", {}) or {}),
    )

    _normalize_device(cfg)
    _normalize_playback(cfg)
    _normalize_diagnostics(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
