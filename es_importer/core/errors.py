"""
Exceptions raised by the importer.

Every fatal condition of a run is an ImporterError subclass; the CLI turns
them into a logged error and a non-zero exit status. A bulk response that
reports item errors is not an exception: the pipeline logs it and carries on.
"""


class ImporterError(Exception):
    """Base class for fatal importer errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InputNotFoundError(ImporterError):
    """Raised when the CSV source file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"CSV file not found: {path}")


class InputReadError(ImporterError):
    """Raised when the CSV file exists but cannot be read or decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read CSV file {path}: {reason}")


class InvalidTargetError(ImporterError):
    """Raised when the upload URL cannot be resolved to host, port and path."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid target URL '{url}': {reason}")


class ConnectivityError(ImporterError):
    """Raised when the liveness probe does not get a 200 answer."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Cannot connect to ES at {url}")


class TransportError(ImporterError):
    """
    Raised when a bulk request fails on the wire.

    Attributes:
        stage: "connect", "write" or "read"
    """

    STAGES = ("connect", "write", "read")

    def __init__(self, stage: str, message: str):
        if stage not in self.STAGES:
            raise ValueError(f"Unknown transport stage: {stage}")
        self.stage = stage
        super().__init__(f"{stage} error: {message}")


class ConfigurationError(ImporterError):
    """Raised when run settings are invalid (index name, batch size, credentials)."""
