"""CLI entrypoints for drawing, playback, diagnostics, and transcript replay."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from pixoo_core import (
    AnimationEncoder,
    AppConfig,
    DiagnosticsExporter,
    PixooSession,
    build_doctor_payload,
    load_config,
)
from pixoo_core.logging_setup import configure_logging
from pixoo_display import DEFAULT_REFRESH_LIMIT, CommandResult, ConfigurationError, ReplayRunner
from pixoo_renderer import PATTERN_NAMES, Color, ResampleMode, build_test_pattern


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _load(args: argparse.Namespace) -> AppConfig:
    cfg = args.cfg
    if args.address:
        cfg.device.address = args.address
    if args.size is not None:
        cfg.device.size = args.size
    if args.simulate:
        cfg.device.simulated = True
    return cfg


def _finish(args: argparse.Namespace, session: PixooSession, payload: dict) -> dict:
    status = session.status()
    payload["session"] = {
        "state": status.state.value,
        "counter": status.counter,
        "frames_sent": status.frames_sent,
        "simulated": status.simulated,
    }
    if args.transcript_out:
        saved = session.save_transcript(Path(args.transcript_out).expanduser())
        payload["transcript"] = str(saved) if saved else None
    return payload


def _result_payload(result: CommandResult) -> dict:
    return {
        "command": result.command,
        "success": result.success,
        "error": str(result.error) if result.error else None,
    }


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = _load(args)
    session = None
    if cfg.device.address or cfg.device.simulated:
        session = PixooSession.from_config(cfg)
    payload = build_doctor_payload(cfg, session=session)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        events = session.recent_events() if session else []
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, recent_protocol_events=events, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def cmd_send_test_pattern(args: argparse.Namespace) -> int:
    cfg = _load(args)
    session = PixooSession.from_config(cfg)
    session.draw_image(build_test_pattern(args.pattern, session.size))
    result = session.push()
    payload = {"pattern": args.pattern, "push": _result_payload(result)}
    _print_json(_finish(args, session, payload))
    return 0 if result.success else 1


def cmd_draw_text(args: argparse.Namespace) -> int:
    cfg = _load(args)
    session = PixooSession.from_config(cfg)
    session.clear()
    session.draw_text(args.text, args.x, args.y, args.color)
    result = session.push()
    payload = {"text": args.text, "push": _result_payload(result)}
    _print_json(_finish(args, session, payload))
    return 0 if result.success else 1


def cmd_show_image(args: argparse.Namespace) -> int:
    cfg = _load(args)
    session = PixooSession.from_config(cfg)
    mode = ResampleMode.PIXEL_ART if args.pixel_art else ResampleMode(cfg.playback.resample_mode)
    session.clear()
    if not session.draw_image(Path(args.path).expanduser(), mode=mode, pad=args.pad):
        _print_json(_finish(args, session, {"path": args.path, "success": False, "error": "image not found"}))
        return 1
    result = session.push()
    _print_json(_finish(args, session, {"path": args.path, "push": _result_payload(result)}))
    return 0 if result.success else 1


def cmd_play_gif(args: argparse.Namespace) -> int:
    cfg = _load(args)
    session = PixooSession.from_config(cfg)
    encoder = AnimationEncoder(
        session,
        min_delay_ms=cfg.playback.min_frame_delay_ms,
        directory_pause_ms=cfg.playback.directory_pause_ms,
        resample_mode=ResampleMode(cfg.playback.resample_mode),
    )
    source = Path(args.path).expanduser()
    if source.is_dir():
        result = encoder.play_directory(source)
    elif args.cumulative:
        result = encoder.send_cumulative(source, speed_ms=args.speed)
    else:
        result = encoder.play_sequential(source, loops=args.loops)
    _print_json(_finish(args, session, {"path": args.path, "playback": asdict(result)}))
    return 0 if result.completed else 1


def cmd_brightness(args: argparse.Namespace) -> int:
    cfg = _load(args)
    session = PixooSession.from_config(cfg)
    result = session.set_brightness(args.value)
    _print_json(_finish(args, session, {"brightness": _result_payload(result)}))
    return 0 if result.success else 1


def cmd_replay(args: argparse.Namespace) -> int:
    runner = ReplayRunner(refresh_limit=args.refresh_limit)
    report = runner.run(Path(args.transcript), strict=not args.no_strict)
    payload = asdict(report)
    payload["success"] = len(report.errors) == 0
    _print_json(payload)
    return 0 if not report.errors else 2


def _hex_color(value: str) -> Color:
    try:
        return Color.from_hex(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _add_device_options(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--address", default=None, help="Device IP address or host name")
    cmd.add_argument("--size", type=int, default=None, help="Canvas size: 16, 32 or 64")
    cmd.add_argument("--simulate", action="store_true", help="Record commands instead of sending them")
    cmd.add_argument("--transcript-out", default=None, help="Write simulated commands to a JSONL transcript")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pixoo", description="Pixoo pixel display tools")
    parser.add_argument("--config", default=None, help="Path to config.json")
    parser.add_argument("--debug", action="store_true", help="Log every request and response")
    sub = parser.add_subparsers(dest="command", required=True)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and session state")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    _add_device_options(doctor_cmd)
    doctor_cmd.set_defaults(func=cmd_doctor)

    pat_cmd = sub.add_parser("send-test-pattern", help="Send deterministic pattern to display")
    pat_cmd.add_argument("--pattern", default="quadrants", choices=list(PATTERN_NAMES))
    _add_device_options(pat_cmd)
    pat_cmd.set_defaults(func=cmd_send_test_pattern)

    text_cmd = sub.add_parser("draw-text", help="Render text with the built-in bitmap font and push it")
    text_cmd.add_argument("text")
    text_cmd.add_argument("--x", type=int, default=0)
    text_cmd.add_argument("--y", type=int, default=0)
    text_cmd.add_argument("--color", type=_hex_color, default="#FFFFFF", help="Hex color, e.g. #FF8800")
    _add_device_options(text_cmd)
    text_cmd.set_defaults(func=cmd_draw_text)

    image_cmd = sub.add_parser("show-image", help="Scale or pad an image onto the canvas and push it")
    image_cmd.add_argument("path")
    image_cmd.add_argument("--pixel-art", action="store_true", help="Nearest-neighbour scaling")
    image_cmd.add_argument("--pad", action="store_true", help="Center unscaled on black instead of scaling")
    _add_device_options(image_cmd)
    image_cmd.set_defaults(func=cmd_show_image)

    gif_cmd = sub.add_parser("play-gif", help="Play an animated image or a directory of them")
    gif_cmd.add_argument("path")
    gif_cmd.add_argument("--cumulative", action="store_true", help="Upload as one device-side animation")
    gif_cmd.add_argument("--loops", type=int, default=1, help="Sequential loops; 0 repeats until interrupted")
    gif_cmd.add_argument("--speed", type=int, default=None, help="Frame speed in ms for cumulative upload")
    _add_device_options(gif_cmd)
    gif_cmd.set_defaults(func=cmd_play_gif)

    bright_cmd = sub.add_parser("brightness", help="Set display brightness (0-100)")
    bright_cmd.add_argument("value", type=int)
    _add_device_options(bright_cmd)
    bright_cmd.set_defaults(func=cmd_brightness)

    replay_cmd = sub.add_parser("replay", help="Analyze a recorded command transcript")
    replay_cmd.add_argument("--transcript", required=True, help="Path to JSONL transcript")
    replay_cmd.add_argument("--refresh-limit", type=int, default=DEFAULT_REFRESH_LIMIT)
    replay_cmd.add_argument("--no-strict", action="store_true", help="Skip frame and picture-id checks")
    replay_cmd.set_defaults(func=cmd_replay)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.cfg = load_config(Path(args.config).expanduser() if args.config else None)
    diagnostics = args.cfg.diagnostics
    configure_logging(keep_files=diagnostics.keep_log_files, console=False, debug=args.debug or diagnostics.debug)
    try:
        return int(args.func(args))
    except ConfigurationError as exc:
        _print_json({"success": False, "error": str(exc)})
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
