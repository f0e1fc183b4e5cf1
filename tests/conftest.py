"""Pytest fixtures for the txt2img client tests.

Provides an in-process HTTP server whose behaviour each test sets by assigning
a handler function, plus a known 1x1 PNG payload.
"""

import base64
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

# Minimal valid PNG (1x1 transparent).
PNG_1X1 = bytes([
    0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,
    0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,
    0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,
    0x08, 0x06, 0x00, 0x00, 0x00, 0x1F, 0x15, 0xC4,
    0x89, 0x00, 0x00, 0x00, 0x0A, 0x49, 0x44, 0x41,
    0x54, 0x78, 0x9C, 0x63, 0x00, 0x01, 0x00, 0x00,
    0x05, 0x00, 0x01, 0x0D, 0x0A, 0x2D, 0xB4, 0x00,
    0x00, 0x00, 0x00, 0x49, 0x45, 0x4E, 0x44, 0xAE,
    0x42, 0x60, 0x82,
])


class RecordedRequest:
    """What the fake server saw for one request."""

    def __init__(self, method, path, headers, body):
        self.method = method
        self.path = path
        self.headers = headers
        self.body = body

    def json(self):
        return json.loads(self.body)


class Reply:
    """Response the fake server sends back."""

    def __init__(self, status=200, body=b"", content_type="application/json", delay=0.0, trickle=0.0):
        self.status = status
        self.body = body if isinstance(body, bytes) else body.encode("utf-8")
        self.content_type = content_type
        self.delay = delay
        # Seconds to wait between body bytes once headers are sent.
        self.trickle = trickle

    @classmethod
    def json(cls, document, status=200, delay=0.0, trickle=0.0):
        return cls(status=status, body=json.dumps(document), delay=delay, trickle=trickle)


class FakeServer:
    """Threaded HTTP server that records requests and replies via `handler`."""

    def __init__(self):
        self.requests = []
        self.handler = lambda recorded: Reply.json({"images": []})
        self._release = threading.Event()
        fake = self

        class _Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length else b""
                recorded = RecordedRequest(self.command, self.path, dict(self.headers), body)
                fake.requests.append(recorded)

                reply = fake.handler(recorded)
                if reply.delay:
                    fake._release.wait(reply.delay)

                try:
                    self.send_response(reply.status)
                    self.send_header("Content-Type", reply.content_type)
                    self.send_header("Content-Length", str(len(reply.body)))
                    self.end_headers()
                    if reply.trickle:
                        fake._trickle(self.wfile, reply)
                    else:
                        self.wfile.write(reply.body)
                except (BrokenPipeError, ConnectionResetError):
                    pass

            def log_message(self, format, *args):
                pass

        self._server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
        self._server.daemon_threads = True
        self._server.block_on_close = False
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    def _trickle(self, wfile, reply):
        for index in range(len(reply.body)):
            wfile.write(reply.body[index:index + 1])
            wfile.flush()
            if self._release.wait(reply.trickle):
                return

    @property
    def url(self):
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def start(self):
        self._thread.start()

    def stop(self):
        self._release.set()
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture
def server():
    fake = FakeServer()
    fake.start()
    yield fake
    fake.stop()


@pytest.fixture
def png_b64():
    return base64.b64encode(PNG_1X1).decode("ascii")


class RecordingLogger:
    """`RequestLogger` that keeps every formatted line."""

    def __init__(self):
        self.lines = []

    def logf(self, fmt, *args):
        self.lines.append(fmt % args)


@pytest.fixture
def recording_logger():
    return RecordingLogger()
