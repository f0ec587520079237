"""Shared fixtures: a local analytics endpoint that records every POST."""
import socketserver
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qsl

import pytest

from stripe_cli.telemetry import EventMetadata


class _RecordingHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        self.server.requests.append({
            "path": self.path,
            "headers": dict(self.headers),
            "body": body,
            "form": dict(parse_qsl(body)),
        })
        self.send_response(self.server.status)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


class AnalyticsEndpoint:
    def __init__(self):
        self.server = ThreadingHTTPServer(("127.0.0.1", 0), _RecordingHandler)
        self.server.requests = []
        self.server.status = 200
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self.server.server_address[:2]
        return f"http://{host}:{port}/0"

    @property
    def requests(self) -> list:
        return self.server.requests

    def respond_with(self, status: int) -> None:
        self.server.status = status


@pytest.fixture
def endpoint():
    ep = AnalyticsEndpoint()
    ep.thread.start()
    try:
        yield ep
    finally:
        ep.server.shutdown()
        ep.server.server_close()


class _NotHTTPHandler(socketserver.StreamRequestHandler):
    """Reads the request headers, then answers with something that is not HTTP."""

    def handle(self):
        while self.rfile.readline() not in (b"\r\n", b"\n", b""):
            pass
        self.wfile.write(b"garbage\r\n\r\n")


@pytest.fixture
def not_http_url():
    """URL of a server whose replies are not HTTP."""
    server = socketserver.ThreadingTCPServer(("127.0.0.1", 0), _NotHTTPHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield f"http://{host}:{port}/0"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def unit_metadata():
    return EventMetadata(
        invocation_id="123456",
        user_agent="Unit Test",
        cli_version="master",
        os="darwin",
        command_path="stripe test",
        merchant="acct_1234",
        generated_resource=False,
    )


@pytest.fixture(autouse=True)
def _telemetry_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's own opt-out and config."""
    monkeypatch.delenv("STRIPE_CLI_TELEMETRY_OPTOUT", raising=False)
    monkeypatch.delenv("STRIPE_CLI_TELEMETRY_URL", raising=False)
    monkeypatch.delenv("STRIPE_ACCOUNT", raising=False)
    monkeypatch.setenv("STRIPE_CONFIG_DIR", str(tmp_path / "stripe"))
