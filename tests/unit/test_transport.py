import http.client
import json
import sys
import tempfile
import unittest
import urllib.error
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "display_protocol"))

from pixoo_display.errors import DeviceConnectionError, ProtocolError
from pixoo_display.protocol import PixooProtocol
from pixoo_display.reporting import ErrorReporter
from pixoo_display.transport import HttpTransport, SimulatedTransport, discover_devices


class _FakeResponse:
    def __init__(self, payload, status=200, raw=None, read_error=None):
        self._payload = payload
        self._raw = raw
        self._read_error = read_error
        self.status = status

    def read(self):
        if self._read_error is not None:
            raise self._read_error
        if self._raw is not None:
            return self._raw
        return json.dumps(self._payload).encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class HttpTransportTests(unittest.TestCase):
    def test_posts_json_to_device_path(self):
        with patch("urllib.request.urlopen", return_value=_FakeResponse({"error_code": 0})) as urlopen:
            out = HttpTransport("192.168.1.50", timeout_s=2.0).post({"Command": "Device/GetDeviceTime"})
        self.assertEqual(out, {"error_code": 0})
        req = urlopen.call_args.args[0]
        self.assertEqual(req.full_url, "http://192.168.1.50/post")
        self.assertEqual(req.get_method(), "POST")
        self.assertEqual(req.get_header("Content-type"), "application/json")
        self.assertEqual(json.loads(req.data.decode("utf-8")), {"Command": "Device/GetDeviceTime"})
        self.assertEqual(urlopen.call_args.kwargs["timeout"], 2.0)

    def test_unreachable_is_connection_error(self):
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("no route")):
            with self.assertRaises(DeviceConnectionError):
                HttpTransport("10.0.0.9").post({"Command": "Channel/GetAllConf"})

    def test_non_success_status_is_connection_error(self):
        with patch("urllib.request.urlopen", return_value=_FakeResponse({}, status=500)):
            with self.assertRaises(DeviceConnectionError) as ctx:
                HttpTransport("10.0.0.9").post({"Command": "Channel/GetAllConf"})
        self.assertEqual(ctx.exception.status, 500)

    def test_malformed_status_line_is_connection_error(self):
        with patch("urllib.request.urlopen", side_effect=http.client.BadStatusLine("GARBAGE")):
            with self.assertRaises(DeviceConnectionError):
                HttpTransport("10.0.0.9").post({"Command": "Channel/SetBrightness", "Brightness": 50})

    def test_truncated_body_is_connection_error(self):
        response = _FakeResponse({}, read_error=http.client.IncompleteRead(b"{\"err"))
        with patch("urllib.request.urlopen", return_value=response):
            with self.assertRaises(DeviceConnectionError):
                HttpTransport("10.0.0.9").post({"Command": "Channel/GetAllConf"})

    def test_malformed_reply_degrades_to_failed_result(self):
        with patch("urllib.request.urlopen", side_effect=http.client.BadStatusLine("GARBAGE")):
            result = PixooProtocol(HttpTransport("10.0.0.9")).set_brightness(50)
        self.assertFalse(result.success)
        self.assertIsInstance(result.error, DeviceConnectionError)

    def test_undecodable_body_is_protocol_error(self):
        with patch("urllib.request.urlopen", return_value=_FakeResponse(None, raw=b"<html>")):
            with self.assertRaises(ProtocolError):
                HttpTransport("10.0.0.9").post({"Command": "Channel/GetAllConf"})


class SimulatedTransportTests(unittest.TestCase):
    def test_records_copies_and_writes_transcript(self):
        t = SimulatedTransport()
        env = {"Command": "Channel/SetBrightness", "Brightness": 10}
        self.assertEqual(t.post(env), {"error_code": 0})
        env["Brightness"] = 99
        self.assertEqual(t.envelopes[0]["Brightness"], 10)

        with tempfile.TemporaryDirectory() as tmp:
            path = t.save_transcript(Path(tmp) / "out" / "session.jsonl")
            rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        self.assertEqual(rows, [{"seq": 1, "command": "Channel/SetBrightness", "envelope": {"Command": "Channel/SetBrightness", "Brightness": 10}}])

    def test_discovery_is_empty(self):
        self.assertEqual(discover_devices(), [])


class ErrorReporterTests(unittest.TestCase):
    def test_report_records_and_never_raises(self):
        reporter = ErrorReporter()
        with self.assertLogs("pixoo.protocol", level="WARNING"):
            reporter.report(ProtocolError("bad", error_code=3), {"Command": "Draw/SendHttpGif"})
        row = reporter.recent_events()[-1]
        self.assertEqual(row["event"], "command_error")
        self.assertEqual(row["command"], "Draw/SendHttpGif")
        self.assertEqual(row["error_code"], 3)

    def test_event_ring_is_bounded(self):
        reporter = ErrorReporter()
        for i in range(1100):
            reporter.record("frame_sent", n=i)
        self.assertEqual(len(reporter.recent_events(limit=5000)), 1000)
        self.assertEqual(reporter.recent_events(limit=1)[0]["n"], 1099)


if __name__ == "__main__":
    unittest.main()
