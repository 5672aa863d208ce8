"""
Integration tests for the raw-socket HTTP transport.

Runs against the in-process fake Elasticsearch from conftest.
"""

import base64
import socket
import threading

import pytest

from es_importer.core.errors import TransportError
from es_importer.core.models import Credentials, UploadTarget
from es_importer.transport import BulkResponse, HttpTransport


def _transport(url, **kwargs):
    return HttpTransport(UploadTarget.from_url(url), **kwargs)


@pytest.mark.integration
class TestPing:
    """Tests for the liveness probe"""

    def test_ping_ok(self, fake_es):
        assert _transport(fake_es.url).ping() is True

        request = fake_es.requests[0]
        assert request.method == "GET"
        assert request.path == "/"
        assert request.headers["host"] == "127.0.0.1"
        assert request.headers["connection"] == "close"
        assert "content-length" not in request.headers

    def test_ping_uses_base_path(self, fake_es):
        assert _transport(fake_es.url + "/cluster1").ping() is True
        assert fake_es.requests[0].path == "/cluster1"

    def test_ping_non_200_is_false(self, fake_es):
        fake_es.ping_status = "503 Service Unavailable"
        assert _transport(fake_es.url).ping() is False

    def test_ping_unauthorized_is_false(self, fake_es):
        fake_es.ping_status = "401 Unauthorized"
        assert _transport(fake_es.url).ping() is False

    def test_ping_connection_refused_is_false(self, closed_port):
        assert _transport(f"http://127.0.0.1:{closed_port}").ping() is False

    def test_ping_sends_credentials(self, fake_es):
        credentials = Credentials(username="elastic", password="changeme")
        _transport(fake_es.url, credentials=credentials).ping()

        header = fake_es.requests[0].headers["authorization"]
        assert header == "Basic " + base64.b64encode(b"elastic:changeme").decode("ascii")


@pytest.mark.integration
class TestPostBulk:
    """Tests for bulk uploads"""

    def test_post_bulk_framing(self, fake_es):
        payload = '{"index":{"_index":"people"}}\n{"name":"Zoë"}\n'
        raw = _transport(fake_es.url).post_bulk("/_bulk", payload)

        request = fake_es.bulk_requests[0]
        assert request.path == "/_bulk"
        assert request.headers["content-type"] == "application/x-ndjson"
        # Length is in bytes, not characters
        assert request.headers["content-length"] == str(len(payload.encode("utf-8")))
        assert request.body.decode("utf-8") == payload
        assert "authorization" not in request.headers

        response = BulkResponse.parse(raw)
        assert response.status_code == 200
        assert response.has_errors is False

    def test_post_bulk_reports_errors(self, fake_es):
        fake_es.bulk_errors = True
        raw = _transport(fake_es.url).post_bulk("/_bulk", '{"index":{"_index":"x"}}\n{}\n')

        response = BulkResponse.parse(raw)
        assert response.has_errors is True
        assert response.item_error_count == 1

    def test_each_request_uses_a_new_connection(self, fake_es):
        transport = _transport(fake_es.url)
        transport.post_bulk("/_bulk", '{"index":{"_index":"x"}}\n{}\n')
        transport.post_bulk("/_bulk", '{"index":{"_index":"x"}}\n{}\n')

        assert len(fake_es.bulk_requests) == 2

    def test_connect_failure(self, closed_port):
        with pytest.raises(TransportError) as exc_info:
            _transport(f"http://127.0.0.1:{closed_port}").post_bulk("/_bulk", "{}\n")

        assert exc_info.value.stage == "connect"

    def test_silent_peer_times_out_on_read(self, fake_es):
        fake_es.silent = True

        with pytest.raises(TransportError) as exc_info:
            _transport(fake_es.url, timeout=0.2).post_bulk("/_bulk", "{}\n")

        assert exc_info.value.stage == "read"

    def test_peer_closing_early_returns_partial_response(self):
        """Test that whatever arrives before the peer closes is returned as-is"""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
            server.bind(("127.0.0.1", 0))
            server.listen(1)
            port = server.getsockname()[1]

            transport = _transport(f"http://127.0.0.1:{port}", timeout=5)

            def answer():
                conn, _ = server.accept()
                with conn:
                    conn.recv(65536)
                    conn.sendall(b"HTTP/1.1 200 OK\r\n\r\n")

            thread = threading.Thread(target=answer, daemon=True)
            thread.start()
            raw = transport.post_bulk("/_bulk", "{}\n")
            thread.join(5)

        assert raw == "HTTP/1.1 200 OK\r\n\r\n"
