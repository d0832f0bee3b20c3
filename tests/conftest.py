import json
import shutil
import socketserver
import tempfile
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler
from pathlib import Path

import pytest

from firecracker_api import MicrovmClient


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: dict
    body: bytes

    def json(self):
        return json.loads(self.body.decode("utf-8"))


class FakeFirecracker:
    """Scripted Firecracker API answering on a real Unix socket.

    Unrouted requests get a 400 with a fault_message, like Firecracker does
    for unknown paths.
    """

    def __init__(self, socket_path: Path):
        self.socket_path = socket_path
        self.routes = {}
        self.requests = []
        self.lock = threading.Lock()

    def reply(self, method, path, status=204, body=b"", content_type="application/json"):
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode("utf-8")
        elif isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[(method, path)] = (status, body, content_type)

    def lookup(self, method, path):
        default = (400, json.dumps({"fault_message": f"Invalid request method and/or path: {method} {path}"}).encode(),
                   "application/json")
        return self.routes.get((method, path), default)


class _Handler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        fake = self.server.fake
        with fake.lock:
            fake.requests.append(RecordedRequest(self.command, self.path, dict(self.headers), body))
            status, payload, content_type = fake.lookup(self.command, self.path)
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if payload:
            self.wfile.write(payload)

    do_GET = _handle
    do_PUT = _handle
    do_PATCH = _handle

    def log_message(self, format, *args):
        pass


class _UnixServer(socketserver.ThreadingUnixStreamServer):
    daemon_threads = True


@pytest.fixture
def fake_firecracker():
    # AF_UNIX paths are limited to ~108 bytes, so stay out of pytest's tmp_path.
    tmpdir = tempfile.mkdtemp(prefix="fc-")
    socket_path = Path(tmpdir) / "api.sock"
    fake = FakeFirecracker(socket_path)
    server = _UnixServer(str(socket_path), _Handler)
    server.fake = fake
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield fake
    finally:
        server.shutdown()
        server.server_close()
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def fc_client(fake_firecracker):
    client = MicrovmClient(fake_firecracker.socket_path)
    yield client
    client.close()
