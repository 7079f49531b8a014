"""HTTP transport abstraction for device communication."""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import DeviceConnectionError, ProtocolError
from .models import DeviceInfo


@dataclass
class HttpConfig:
    address: str
    path: str = "/post"
    timeout_s: float = 5.0

    @property
    def url(self) -> str:
        return f"http://{self.address}{self.path}"


class HttpTransport:
    """Thin wrapper over urllib with the fixed request shape the device expects."""

    simulated = False

    def __init__(self, address: str, timeout_s: float = 5.0) -> None:
        self.config = HttpConfig(address=address, timeout_s=timeout_s)

    @property
    def url(self) -> str:
        return self.config.url

    def post(self, envelope: dict[str, Any]) -> dict[str, Any]:
        body = json.dumps(envelope).encode("utf-8")
        req = urllib.request.Request(
            self.url,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout_s) as resp:
                status = getattr(resp, "status", 200)
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            raise DeviceConnectionError(f"Unexpected status {exc.code} from {self.url}", status=exc.code) from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise DeviceConnectionError(f"Device unreachable at {self.url}: {exc}") from exc

        if status != 200:
            raise DeviceConnectionError(f"Unexpected status {status} from {self.url}", status=status)

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProtocolError(f"Undecodable response from {self.url}") from exc
        if not isinstance(payload, dict):
            raise ProtocolError(f"Unexpected response shape from {self.url}")
        return payload


class SimulatedTransport:
    """Records every envelope instead of sending it; always answers success."""

    simulated = True

    def __init__(self) -> None:
        self.envelopes: list[dict[str, Any]] = []

    @property
    def url(self) -> str | None:
        return None

    def post(self, envelope: dict[str, Any]) -> dict[str, Any]:
        self.envelopes.append(dict(envelope))
        return {"error_code": 0}

    def commands(self) -> list[str]:
        return [str(e.get("Command")) for e in self.envelopes]

    def save_transcript(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            for seq, envelope in enumerate(self.envelopes, start=1):
                row = {"seq": seq, "command": envelope.get("Command"), "envelope": envelope}
                fh.write(json.dumps(row, ensure_ascii=True) + "\n")
        return path


def discover_devices() -> list[DeviceInfo]:
    """LAN discovery is not supported; callers must pass an address."""
    return []
