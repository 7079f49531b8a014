import base64
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "display_protocol"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from pixoo_core.animation import AnimationEncoder, FrameScheduler
from pixoo_core.session import PixooSession
from pixoo_display.transport import SimulatedTransport
from pixoo_renderer.models import AnimationFrame


class RecordingScheduler:
    def __init__(self, stop_after=None):
        self.waits = []
        self.stop_after = stop_after

    def wait(self, delay_ms):
        self.waits.append(delay_ms)
        return self.stop_after is None or len(self.waits) < self.stop_after

    def cancel(self):
        self.stop_after = 0


class FlakyTransport(SimulatedTransport):
    """Accepts ``ok`` picture pushes, then answers with an error code."""

    def __init__(self, ok):
        super().__init__()
        self.ok = ok

    def post(self, envelope):
        super().post(envelope)
        if envelope["Command"] == "Draw/SendHttpGif":
            if self.ok <= 0:
                return {"error_code": 1}
            self.ok -= 1
        return {"error_code": 0}


def _dot(x, y, size=16, color=(255, 0, 0, 255), delay=100):
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    img.putpixel((x, y), color)
    return AnimationFrame(image=img, delay_ms=delay)


def _pixel(envelope, x, y, size=16):
    raw = base64.b64decode(envelope["PicData"])
    i = (y * size + x) * 3
    return tuple(raw[i : i + 3])


class CumulativeTests(unittest.TestCase):
    def test_frames_accumulate_without_clearing(self):
        session = PixooSession(size=16, simulated=True)
        frames = [_dot(1, 1), _dot(5, 5, color=(0, 255, 0, 255))]
        result = AnimationEncoder(session, scheduler=RecordingScheduler()).send_cumulative(frames, speed_ms=150)

        self.assertTrue(result.completed)
        self.assertEqual(result.frames_sent, 2)
        pushes = [e for e in session.transport.envelopes if e["Command"] == "Draw/SendHttpGif"]
        self.assertEqual(session.transport.commands()[0], "Draw/ResetHttpGifId")
        self.assertEqual([(e["PicNum"], e["PicOffset"], e["PicID"], e["PicSpeed"]) for e in pushes], [(2, 0, 1, 150), (2, 1, 1, 150)])
        self.assertEqual(_pixel(pushes[0], 5, 5), (0, 0, 0))
        self.assertEqual(_pixel(pushes[1], 1, 1), (255, 0, 0))
        self.assertEqual(_pixel(pushes[1], 5, 5), (0, 255, 0))

    def test_frame_delay_used_when_no_speed(self):
        session = PixooSession(size=16, simulated=True)
        AnimationEncoder(session).send_cumulative([_dot(0, 0, delay=70)])
        self.assertEqual(session.transport.envelopes[-1]["PicSpeed"], 70)

    def test_smaller_frames_are_resampled(self):
        session = PixooSession(size=32, simulated=True)
        small = AnimationFrame(image=Image.new("RGBA", (8, 8), (0, 0, 255, 255)))
        AnimationEncoder(session).send_cumulative([small])
        self.assertEqual(_pixel(session.transport.envelopes[-1], 31, 31, size=32), (0, 0, 255))

    def test_first_error_aborts_remaining_frames(self):
        session = PixooSession(size=16, transport=FlakyTransport(ok=1))
        frames = [_dot(i, 0) for i in range(4)]
        result = AnimationEncoder(session).send_cumulative(frames)
        self.assertFalse(result.completed)
        self.assertEqual(result.aborted_reason, "protocol_error")
        self.assertEqual(result.frames_sent, 1)
        pushes = [e for e in session.transport.envelopes if e["Command"] == "Draw/SendHttpGif"]
        self.assertEqual(len(pushes), 2)

    def test_missing_file(self):
        session = PixooSession(size=16, simulated=True)
        result = AnimationEncoder(session).send_cumulative(Path("/nonexistent/a.gif"))
        self.assertEqual(result.aborted_reason, "resource_error")
        self.assertEqual(session.frames_sent, 0)


class SequentialTests(unittest.TestCase):
    def test_each_frame_pushed_with_delay_floor(self):
        session = PixooSession(size=16, simulated=True)
        scheduler = RecordingScheduler()
        frames = [_dot(0, 0, delay=10), _dot(1, 1, delay=200)]
        result = AnimationEncoder(session, scheduler=scheduler).play_sequential(frames, loops=2)
        self.assertTrue(result.completed)
        self.assertEqual(result.frames_sent, 4)
        self.assertEqual(scheduler.waits, [50, 200, 50, 200])
        self.assertEqual(session.frames_sent, 4)
        # Sequential frames start from a cleared canvas.
        self.assertEqual(_pixel(session.transport.envelopes[-1], 0, 0), (0, 0, 0))

    def test_infinite_loop_stops_when_cancelled(self):
        session = PixooSession(size=16, simulated=True)
        scheduler = RecordingScheduler(stop_after=5)
        result = AnimationEncoder(session, scheduler=scheduler).play_sequential([_dot(0, 0)], loops=0)
        self.assertEqual(result.aborted_reason, "interrupted")
        self.assertEqual(result.frames_sent, 5)
        self.assertEqual(session.recent_events()[-1]["error_type"], "InterruptedPlayback")


class DirectoryTests(unittest.TestCase):
    def test_one_picture_per_file(self):
        session = PixooSession(size=16, simulated=True)
        scheduler = RecordingScheduler()
        with tempfile.TemporaryDirectory() as tmp:
            for name in ("b.gif", "a.gif"):
                Image.new("RGB", (16, 16), (255, 0, 0)).save(Path(tmp) / name)
            Image.new("RGB", (16, 16)).save(Path(tmp) / "skip.png")
            result = AnimationEncoder(session, scheduler=scheduler).play_directory(tmp, pause_ms=1000)
        self.assertTrue(result.completed)
        self.assertEqual(result.frames_total, 2)
        self.assertEqual(result.frames_sent, 2)
        self.assertEqual(scheduler.waits, [1000, 1000])
        self.assertTrue(all(e["PicNum"] == 1 for e in session.transport.envelopes))

    def test_missing_directory_returns_early(self):
        session = PixooSession(size=16, simulated=True)
        result = AnimationEncoder(session).play_directory("/nonexistent/dir")
        self.assertEqual(result.frames_sent, 0)
        self.assertEqual(result.aborted_reason, "resource_error")
        self.assertEqual(session.transport.envelopes, [])

    def test_empty_directory(self):
        session = PixooSession(size=16, simulated=True)
        with tempfile.TemporaryDirectory() as tmp:
            result = AnimationEncoder(session).play_directory(tmp)
        self.assertTrue(result.completed)
        self.assertEqual(result.frames_sent, 0)


class FrameSchedulerTests(unittest.TestCase):
    def test_cancel_interrupts_wait(self):
        scheduler = FrameScheduler()
        self.assertTrue(scheduler.wait(0))
        scheduler.cancel()
        self.assertFalse(scheduler.wait(10_000))
        scheduler.reset()
        self.assertTrue(scheduler.wait(1))

    def test_keyboard_interrupt_cancels_wait(self):
        scheduler = FrameScheduler()
        with patch.object(scheduler._cancelled, "wait", side_effect=KeyboardInterrupt):
            self.assertFalse(scheduler.wait(500))
        self.assertTrue(scheduler.cancelled)

    def test_keyboard_interrupt_ends_infinite_playback(self):
        session = PixooSession(size=16, simulated=True)
        scheduler = FrameScheduler()
        frames = [_dot(0, 0), _dot(1, 1)]
        with patch.object(scheduler._cancelled, "wait", side_effect=[None, None, KeyboardInterrupt]):
            result = AnimationEncoder(session, scheduler=scheduler).play_sequential(frames, loops=0)
        self.assertFalse(result.completed)
        self.assertEqual(result.aborted_reason, "interrupted")
        self.assertEqual(result.frames_sent, 3)
        self.assertEqual(session.recent_events()[-1]["error_type"], "InterruptedPlayback")


if __name__ == "__main__":
    unittest.main()
