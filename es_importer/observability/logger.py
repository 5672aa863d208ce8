"""
Structured logging for es-importer

Records are written to stderr, one JSON object per line by default
(python-json-logger), so an import can be piped into a log shipper while
stdout only carries the final summary. LOG_FORMAT=text switches to a
human-readable layout.
"""
import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Iterator, TextIO

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "es_importer"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FIELDS = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FIELDS = "%(asctime)s %(levelname)-8s %(name)s [%(module)s:%(funcName)s] %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Adds timestamp, level, logger, module and function to every record."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = str(log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName


def build_formatter(format_type: str | None = None) -> logging.Formatter:
    """
    Pick the formatter for a format name.

    Args:
        format_type: "json" or "text"; falls back to LOG_FORMAT, then json

    Returns:
        Formatter instance
    """
    format_type = (format_type or os.getenv("LOG_FORMAT") or "json").lower()
    if format_type == "text":
        return logging.Formatter(fmt=TEXT_FIELDS, datefmt="%Y-%m-%d %H:%M:%S")
    return CustomJsonFormatter(fmt=JSON_FIELDS, datefmt="%Y-%m-%dT%H:%M:%S")


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure a logger with a single stream handler

    Calling it again replaces the previous handler, so the CLI can set up
    logging before the configuration is resolved and again afterwards.

    Args:
        name: Logger name
        level: Level name (defaults to env var LOG_LEVEL, then INFO)
        format_type: "json" or "text"
        stream: Output stream (defaults to sys.stderr)

    Returns:
        Configured logger instance
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_level = LOG_LEVELS.get(level_name, logging.INFO)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(build_formatter(format_type))

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance

    Module loggers ("es_importer.*") stay bare and propagate to the package
    logger configured by setup_logger(). Any other name is configured on
    first use.
    """
    logger = logging.getLogger(name)
    if name.startswith(f"{DEFAULT_LOGGER_NAME}.") or logger.handlers:
        return logger
    return setup_logger(name)


@contextmanager
def log_operation(
    operation_name: str,
    logger: logging.Logger | None = None,
    **extra_fields,
) -> Iterator[None]:
    """
    Log the start, duration and outcome of an operation

    Exceptions are logged at ERROR and re-raised.

    Usage:
        with log_operation("Sending bulk batch", logger=logger, batch=3):
            transport.post_bulk(path, payload)
    """
    logger = logger or get_logger()
    fields = {"operation": operation_name, **extra_fields}
    started = time.monotonic()
    logger.debug(f"Starting: {operation_name}", extra=fields)

    try:
        yield
    except Exception as e:
        logger.error(
            f"Failed: {operation_name}",
            extra={
                **fields,
                "duration_seconds": round(time.monotonic() - started, 3),
                "status": "error",
                "error_type": type(e).__name__,
                "error_message": str(e),
            },
        )
        raise

    logger.info(
        f"Completed: {operation_name}",
        extra={
            **fields,
            "duration_seconds": round(time.monotonic() - started, 3),
            "status": "success",
        },
    )
