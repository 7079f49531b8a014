"""Replay/analysis utilities for recorded command transcripts."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .protocol import DEFAULT_REFRESH_LIMIT, PixooCommand


@dataclass(frozen=True)
class ReplayEvent:
    line: int
    command: str
    envelope: dict[str, Any]


@dataclass
class ReplayReport:
    total_events: int = 0
    frame_pushes: int = 0
    animation_frames: int = 0
    resets: int = 0
    max_pic_id: int = 0
    pic_data_bytes: int = 0
    command_counts: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


class ReplayRunner:
    def __init__(self, refresh_limit: int = DEFAULT_REFRESH_LIMIT) -> None:
        self.refresh_limit = refresh_limit

    @staticmethod
    def _decoded_size(value: Any) -> int:
        try:
            return len(base64.b64decode(str(value), validate=True))
        except (binascii.Error, ValueError):
            return 0

    def _parse_line(self, line_no: int, line: str) -> ReplayEvent | None:
        stripped = line.strip()
        if not stripped:
            return None
        obj = json.loads(stripped)
        envelope = obj.get("envelope") if isinstance(obj.get("envelope"), dict) else obj
        command = obj.get("command") or envelope.get("Command") or "unknown"
        return ReplayEvent(line=line_no, command=str(command), envelope=envelope)

    def parse(self, transcript_path: Path) -> list[ReplayEvent]:
        events: list[ReplayEvent] = []
        for idx, line in enumerate(transcript_path.read_text(encoding="utf-8").splitlines(), start=1):
            event = self._parse_line(idx, line)
            if event is not None:
                events.append(event)
        return events

    def run(self, transcript_path: Path, strict: bool = True) -> ReplayReport:
        events = self.parse(transcript_path)
        report = ReplayReport(total_events=len(events))
        expected_offset = 0
        over_limit = False
        offset_gap = False

        for event in events:
            report.command_counts[event.command] = report.command_counts.get(event.command, 0) + 1

            if event.command == PixooCommand.RESET_GIF_ID.value:
                report.resets += 1
                continue
            if event.command != PixooCommand.SEND_GIF.value:
                continue

            env = event.envelope
            pic_id = int(env.get("PicID", 0))
            pic_num = int(env.get("PicNum", 1))
            offset = int(env.get("PicOffset", 0))
            report.max_pic_id = max(report.max_pic_id, pic_id)
            report.pic_data_bytes += self._decoded_size(env.get("PicData", ""))

            if pic_num <= 1:
                report.frame_pushes += 1
                if pic_id > self.refresh_limit:
                    over_limit = True
                continue

            report.animation_frames += 1
            if offset != 0 and offset != expected_offset:
                offset_gap = True
            expected_offset = offset + 1

        if strict:
            if report.frame_pushes + report.animation_frames < 1:
                report.errors.append("missing_frames")
            if over_limit:
                report.errors.append("pic_id_over_limit")
            if offset_gap:
                report.errors.append("animation_offset_gap")

        return report
