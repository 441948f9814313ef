import re
import socket
import threading
import time
from unittest.mock import patch
from urllib.parse import parse_qs

import pytest
from flask import Flask, Response, request
from werkzeug.serving import make_server

from switchstat.device import DeviceClient, TransportError, digest

STATS_PAGE = b"<table><tr><td>Port</td></tr><tr><td>1</td></tr></table>"


class FakeSwitch:
    """Minimal stand-in for the switch web UI, served from a background thread."""

    def __init__(self):
        self.requests = []
        self.mode = "ok"

        app = Flask("fake_switch")
        app.route("/port.cgi", methods=["GET"])(self.handleRequest)

        self.server = make_server("127.0.0.1", 0, app, threaded=True)
        self.address = f"127.0.0.1:{self.server.server_port}"
        self._thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self._thread.start()

    def handleRequest(self):
        self.requests.append(
            {
                "method": request.method,
                "args": request.args.to_dict(),
                "cookies": request.cookies.to_dict(),
                "content_type": request.headers.get("Content-Type"),
                "form": parse_qs(request.get_data(as_text=True)),
            }
        )
        if self.mode == "hang":
            time.sleep(1.5)
        elif self.mode == "trickle":

            def generate():
                for _ in range(10):
                    time.sleep(0.2)
                    yield b"<tr><td>x</td></tr>\n"

            return Response(generate(), mimetype="text/html")
        elif self.mode == "error":
            return "Internal error", 500
        elif self.mode == "empty":
            return Response(b"", mimetype="text/html")
        return Response(STATS_PAGE, mimetype="text/html")

    def stop(self):
        self.server.shutdown()


@pytest.fixture
def switch():
    server = FakeSwitch()
    yield server
    server.stop()


class TestDigest:
    def test_known_value(self):
        # md5("adminadmin")
        assert digest("admin", "admin") == "f6fdffe48c908deb0f4c3bd36c032e72"

    @pytest.mark.parametrize("username,password", [("admin", "admin"), ("", ""), ("user", "pässwörd"), ("a" * 200, "b")])
    def test_fixed_length_lowercase_hex(self, username, password):
        value = digest(username, password)
        assert re.fullmatch(r"[0-9a-f]{32}", value)
        assert digest(username, password) == value


class TestDeviceClient:
    def test_wire_contract(self, switch):
        client = DeviceClient(switch.address, "admin", "secret", timeout=5)
        body = client.fetch()
        assert body == STATS_PAGE

        expected = digest("admin", "secret")
        assert len(switch.requests) == 1
        sent = switch.requests[0]
        assert sent["method"] == "GET"
        assert sent["args"] == {"page": "stats"}
        assert sent["cookies"] == {"admin": expected}
        assert sent["content_type"] == "application/x-www-form-urlencoded"
        assert sent["form"] == {
            "username": ["admin"],
            "password": ["secret"],
            "language": ["EN"],
            "Response": [expected],
        }

    def test_url(self):
        assert DeviceClient("10.0.0.1", "a", "b").url == "http://10.0.0.1/port.cgi"

    def test_reused_across_fetches(self, switch):
        client = DeviceClient(switch.address, "admin", "secret", timeout=5)
        client.fetch()
        client.fetch()
        assert len(switch.requests) == 2

    def test_status_code_not_inspected(self, switch):
        switch.mode = "error"
        client = DeviceClient(switch.address, "admin", "secret", timeout=5)
        assert client.fetch() == b"Internal error"

    def test_read_timeout(self, switch):
        switch.mode = "hang"
        client = DeviceClient(switch.address, "admin", "secret", timeout=0.3)
        with pytest.raises(TransportError):
            client.fetch()

    def test_overall_deadline(self, switch):
        # each chunk arrives within the read timeout but the whole body does not
        switch.mode = "trickle"
        client = DeviceClient(switch.address, "admin", "secret", timeout=0.5)
        with pytest.raises(TransportError):
            client.fetch()

    def test_deadline_checked_for_empty_body(self, switch):
        switch.mode = "empty"
        client = DeviceClient(switch.address, "admin", "secret", timeout=5)
        with patch("switchstat.device.time") as mock_time:
            # deadline computed at 0, body fully read at 100
            mock_time.monotonic.side_effect = [0.0, 100.0]
            with pytest.raises(TransportError):
                client.fetch()

    def test_empty_body_within_deadline(self, switch):
        switch.mode = "empty"
        client = DeviceClient(switch.address, "admin", "secret", timeout=5)
        assert client.fetch() == b""

    def test_connection_refused(self):
        # grab a free port, then release it so nothing listens there
        sock = socket.socket()
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
        sock.close()
        client = DeviceClient(f"127.0.0.1:{port}", "admin", "secret", timeout=1)
        with pytest.raises(TransportError):
            client.fetch()
