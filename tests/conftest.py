"""
Pytest configuration and fixtures for es-importer tests

This module provides shared fixtures for unit, integration, and E2E tests,
including an in-process fake Elasticsearch that speaks just enough HTTP/1.1
for the liveness probe and the _bulk endpoint.
"""
import json
import logging
import socket
import socketserver
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generator

import pytest


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require network access"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests against the fake Elasticsearch server"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that run the command line"
    )


# =======================
# FAKE ELASTICSEARCH
# =======================

@dataclass
class RecordedRequest:
    """One request received by the fake server."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def lines(self) -> list[str]:
        return self.body.decode("utf-8").splitlines()

    @property
    def document_count(self) -> int:
        return len(self.lines) // 2


class _FakeElasticsearchHandler(socketserver.StreamRequestHandler):
    def handle(self):
        server: FakeElasticsearch = self.server
        if server.silent:
            # Accept and never answer
            server.release.wait(10)
            return

        request_line = self.rfile.readline().decode("latin-1").rstrip("\r\n")
        if not request_line:
            return
        headers = {}
        while True:
            line = self.rfile.readline().decode("latin-1").rstrip("\r\n")
            if not line:
                break
            name, _, value = line.partition(":")
            headers[name.strip().lower()] = value.strip()

        length = int(headers.get("content-length", "0"))
        body = self.rfile.read(length) if length else b""
        method, path, _ = request_line.split(" ", 2)
        request = RecordedRequest(method=method, path=path, headers=headers, body=body)
        server.requests.append(request)

        if method == "GET":
            status = server.ping_status
            payload = json.dumps({"cluster_name": "fake", "tagline": "You Know, for Search"})
        else:
            status = "200 OK"
            items = []
            for i in range(request.document_count):
                outcome = {"_index": "fake", "status": 201}
                if server.bulk_errors and i == 0:
                    outcome = {"_index": "fake", "status": 400, "error": {"type": "mapper_parsing_exception"}}
                items.append({"index": outcome})
            payload = json.dumps(
                {"took": 1, "errors": server.bulk_errors, "items": items},
                separators=(",", ":"),
            )

        data = payload.encode("utf-8")
        self.wfile.write(
            f"HTTP/1.1 {status}\r\n"
            f"Content-Type: application/json\r\n"
            f"Content-Length: {len(data)}\r\n"
            f"\r\n".encode("ascii") + data
        )


class FakeElasticsearch(socketserver.ThreadingTCPServer):
    """
    Threaded TCP server on an ephemeral port recording every request

    Attributes:
        ping_status: Status returned for GET requests
        bulk_errors: Whether bulk responses report "errors":true
        silent: Accept connections but never answer
    """

    allow_reuse_address = True
    daemon_threads = True

    def __init__(self):
        super().__init__(("127.0.0.1", 0), _FakeElasticsearchHandler)
        self.requests: list[RecordedRequest] = []
        self.ping_status = "200 OK"
        self.bulk_errors = False
        self.silent = False
        self.release = threading.Event()

    @property
    def port(self) -> int:
        return self.server_address[1]

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    @property
    def bulk_requests(self) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method == "POST"]


@pytest.fixture(scope="function")
def fake_es() -> Generator[FakeElasticsearch, None, None]:
    """
    Start a fake Elasticsearch for a single test

    Yields:
        Running FakeElasticsearch
    """
    server = FakeElasticsearch()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server

    server.release.set()
    server.shutdown()
    server.server_close()


@pytest.fixture(scope="function")
def closed_port() -> int:
    """
    A local port with nothing listening on it

    Returns:
        Port number that refuses connections
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_data_dir() -> Path:
    """
    Get path to test data fixtures directory

    Returns:
        Path to tests/fixtures directory
    """
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="function")
def people_csv(tmp_path) -> Path:
    """CSV with the two-row people example."""
    path = tmp_path / "people.csv"
    path.write_text("id,name,active\n1,Alice,true\n2,Bob,\n", encoding="utf-8")
    return path


@pytest.fixture(scope="function")
def make_csv(tmp_path):
    """
    Factory writing CSV text to a temporary file

    Returns:
        Callable(text, name="data.csv") -> Path
    """
    def _make(text: str, name: str = "data.csv") -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _make


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(autouse=True, scope="function")
def clean_env(monkeypatch):
    """Remove importer environment variables so tests see defaults"""
    for var in ("ES_HOST", "ES_USER", "ES_PASSWORD", "ES_BATCH_SIZE", "ES_TIMEOUT", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True, scope="function")
def reset_package_logger():
    """
    Undo setup_logger() on the package logger after each test

    setup_logger() disables propagation, which would hide records from caplog.
    """
    yield
    package_logger = logging.getLogger("es_importer")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
