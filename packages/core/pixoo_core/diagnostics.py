"""Diagnostics export helpers for local support bundles."""

from __future__ import annotations

import json
import platform
import re
import tempfile
import zipfile
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pixoo_display import ProtocolState, discover_devices

from .config import AppConfig, config_path
from .logging_setup import log_dir
from .session import PixooSession


_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth|mac)", re.IGNORECASE)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    return str(value)


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(str(k)):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def build_doctor_payload(cfg: AppConfig, session: PixooSession | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config": redact(asdict(cfg)),
        "devices": [asdict(d) for d in discover_devices()],
        "session": None,
        "device_configuration": None,
    }
    if session is None:
        return payload

    status = session.status()
    payload["session"] = {
        "state": status.state.value,
        "address": status.address,
        "size": status.size,
        "counter": status.counter,
        "frames_sent": status.frames_sent,
        "resets": status.resets,
        "errors": status.errors,
        "simulated": status.simulated,
    }
    if status.state == ProtocolState.READY:
        payload["device_configuration"] = redact(session.get_all_device_configurations())
    return payload


class DiagnosticsExporter:
    def __init__(self, app_name: str = "Pixoo") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: AppConfig,
        doctor_payload: dict[str, Any],
        recent_protocol_events: list[dict[str, Any]] | None = None,
        output_dir: Path | None = None,
    ) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"pixoo-diagnostics-{stamp}.zip"

        config_file = config_path()
        logs = sorted(log_dir().glob("*.log*"))

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "config_path": str(config_file),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(redact(doctor_payload), indent=2, sort_keys=True, default=_jsonable))
            zf.writestr("config.redacted.json", json.dumps(redact(asdict(cfg)), indent=2, sort_keys=True))
            zf.writestr(
                "protocol_events.json",
                json.dumps(redact(recent_protocol_events or []), indent=2, sort_keys=True, default=_jsonable),
            )

            for item in logs:
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path
