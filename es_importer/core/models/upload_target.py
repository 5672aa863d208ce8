"""
UploadTarget and Credentials models describing where bulk payloads go.
"""

import base64

from pydantic import BaseModel, Field

from es_importer.core.errors import InvalidTargetError

DEFAULT_PORT = 9200
SUPPORTED_SCHEME = "http://"


class UploadTarget(BaseModel):
    """
    Connection parameters resolved once from the base URL (immutable for the run).

    Attributes:
        host: Host name or address, also sent as the Host header
        port: TCP port (9200 when the URL has none)
        base_path: "" or "/<prefix>" taken verbatim from the URL
    """

    host: str = Field(..., min_length=1)
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    base_path: str = ""

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "host": "localhost",
                "port": 9200,
                "base_path": ""
            }
        }

    @classmethod
    def from_url(cls, url: str) -> "UploadTarget":
        """
        Resolve http://<host>[:<port>][/<base-path>] into a target.

        Args:
            url: Base URL of the cluster

        Returns:
            UploadTarget

        Raises:
            InvalidTargetError: Unsupported scheme, empty host or bad port
        """
        if not url.startswith(SUPPORTED_SCHEME):
            raise InvalidTargetError(url, "Only http:// supported")

        rest = url[len(SUPPORTED_SCHEME):]
        host_port, slash, path = rest.partition("/")
        base_path = f"/{path}" if slash else ""

        host, colon, port_text = host_port.partition(":")
        if not host:
            raise InvalidTargetError(url, "missing host")

        port = DEFAULT_PORT
        if colon:
            if not port_text.isascii() or not port_text.isdigit():
                raise InvalidTargetError(url, "Invalid port")
            port = int(port_text)
            if not 1 <= port <= 65535:
                raise InvalidTargetError(url, "Invalid port")

        return cls(host=host, port=port, base_path=base_path)

    @property
    def address(self) -> tuple[str, int]:
        return self.host, self.port

    @property
    def probe_path(self) -> str:
        """Path of the liveness probe: the base path, or / when there is none."""
        return self.base_path or "/"

    @property
    def bulk_path(self) -> str:
        return f"{self.base_path}/_bulk"

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}{self.base_path}"


class Credentials(BaseModel):
    """HTTP Basic credentials sent on the probe and every bulk request."""

    username: str
    password: str = Field(..., repr=False)

    class Config:
        frozen = True

    def authorization_header(self) -> str:
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"
