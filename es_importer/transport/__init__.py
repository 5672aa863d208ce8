"""
Raw-socket HTTP transport for the bulk API.
"""

from .connection import HttpTransport, build_request
from .response import BulkResponse

__all__ = [
    "HttpTransport",
    "BulkResponse",
    "build_request",
]
