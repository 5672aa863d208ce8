"""
Minimal HTTP/1.1 transport on raw sockets

Each request opens its own TCP connection, sends "Connection: close",
and drains the response until the peer closes. There is no keep-alive,
TLS, chunked decoding or retry; the caller decides what a failure means.
"""
import socket
from contextlib import contextmanager
from typing import Iterator

from es_importer.core.errors import TransportError
from es_importer.core.models import Credentials, UploadTarget
from es_importer.observability.logger import get_logger

logger = get_logger(__name__)

CRLF = "\r\n"
NDJSON_CONTENT_TYPE = "application/x-ndjson"
OK_STATUS_PREFIX = b"HTTP/1.1 200"
RECV_CHUNK_SIZE = 65536


def build_request(
    method: str,
    path: str,
    host: str,
    body: bytes = b"",
    content_type: str | None = None,
    credentials: Credentials | None = None,
) -> bytes:
    """
    Frame an HTTP/1.1 request.

    Args:
        method: HTTP method (GET, POST)
        path: Request target
        host: Value of the Host header
        body: Request body; Content-Length is sent whenever a body or a
            content type is given
        content_type: Optional Content-Type header value
        credentials: Optional Basic-Auth credentials

    Returns:
        Request bytes ready to send
    """
    lines = [f"{method} {path} HTTP/1.1", f"Host: {host}"]
    if content_type:
        lines.append(f"Content-Type: {content_type}")
    lines.append("Connection: close")
    if body or content_type:
        lines.append(f"Content-Length: {len(body)}")
    if credentials is not None:
        lines.append(f"Authorization: {credentials.authorization_header()}")

    head = CRLF.join(lines) + CRLF + CRLF
    return head.encode("utf-8") + body


class HttpTransport:
    """
    Synchronous one-connection-per-request HTTP client for a single cluster

    Used for the liveness probe and for every bulk upload of a run.
    """

    def __init__(
        self,
        target: UploadTarget,
        credentials: Credentials | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize transport

        Args:
            target: Resolved host, port and base path
            credentials: Optional Basic-Auth credentials for every request
            timeout: Seconds allowed for connect and for each socket
                send/recv; None blocks indefinitely
        """
        self.target = target
        self.credentials = credentials
        self.timeout = timeout

    @contextmanager
    def open_connection(self) -> Iterator[socket.socket]:
        """
        Open a TCP connection to the target

        Yields:
            Connected socket, closed when the block exits

        Raises:
            TransportError: If the connection cannot be established
        """
        try:
            sock = socket.create_connection(self.target.address, timeout=self.timeout)
        except OSError as e:
            raise TransportError("connect", str(e) or type(e).__name__) from e

        with sock:
            sock.settimeout(self.timeout)
            yield sock

    def exchange(self, request: bytes) -> bytes:
        """
        Send one request and read the whole response

        Args:
            request: Framed request bytes

        Returns:
            Raw response bytes (status line, headers and body)

        Raises:
            TransportError: On connect, write or read failure
        """
        with self.open_connection() as sock:
            try:
                sock.sendall(request)
            except OSError as e:
                raise TransportError("write", str(e) or type(e).__name__) from e

            chunks = []
            try:
                while True:
                    chunk = sock.recv(RECV_CHUNK_SIZE)
                    if not chunk:
                        break
                    chunks.append(chunk)
            except OSError as e:
                raise TransportError("read", str(e) or type(e).__name__) from e

        return b"".join(chunks)

    def ping(self) -> bool:
        """
        Probe the cluster with GET on the base path

        Returns:
            True iff the response status line starts with "HTTP/1.1 200"
        """
        request = build_request(
            "GET",
            self.target.probe_path,
            self.target.host,
            credentials=self.credentials,
        )
        try:
            response = self.exchange(request)
        except TransportError as e:
            logger.warning(f"Liveness probe failed for {self.target.url}: {e}")
            return False

        if not response.startswith(OK_STATUS_PREFIX):
            status_line = response.split(b"\r\n", 1)[0].decode("utf-8", errors="replace")
            logger.warning(f"Liveness probe got unexpected status: {status_line or '<empty>'}")
            return False

        return True

    def post_bulk(self, path: str, payload: str) -> str:
        """
        POST an NDJSON payload

        Args:
            path: Request path, normally target.bulk_path
            payload: Bulk payload with trailing newline

        Returns:
            Raw response text, headers included

        Raises:
            TransportError: On connect, write or read failure
        """
        body = payload.encode("utf-8")
        request = build_request(
            "POST",
            path,
            self.target.host,
            body=body,
            content_type=NDJSON_CONTENT_TYPE,
            credentials=self.credentials,
        )
        logger.debug(f"POST {path} ({len(body)} bytes)")
        response = self.exchange(request)
        return response.decode("utf-8", errors="replace")
