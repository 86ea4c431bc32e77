"""
Logging helpers for NovaPay Python SDK

The SDK logs through a plain ``logging.Logger``. Callers can pass their own
logger, or build the default stderr logger here once at start-up and hand it to
``ClientConfig``.
"""

import logging
import sys
from enum import IntEnum
from typing import Optional, TextIO, Union

from .canonical_json import pretty_json

SDK_LOGGER_NAME = "novapay_sdk"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s: NovaPay: %(message)s"

BODY_PREVIEW_LIMIT = 4096


class LogLevel(IntEnum):
    """SDK log levels, ordered Debug < Info < Warn < Error < Off"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    OFF = logging.CRITICAL + 10


def create_default_logger(
    level: Union[LogLevel, int] = LogLevel.INFO,
    stream: Optional[TextIO] = None,
    name: str = SDK_LOGGER_NAME + ".default",
) -> logging.Logger:
    """
    Create a stderr logger tagged with ``NovaPay``.

    Calling this again with the same name reuses the logger and replaces its
    handler rather than stacking another one.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(int(level))
    logger.propagate = False
    return logger


def create_nop_logger() -> logging.Logger:
    """Logger that discards everything."""
    logger = logging.getLogger(SDK_LOGGER_NAME + ".nop")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.setLevel(LogLevel.OFF)
    logger.propagate = False
    return logger


def set_log_level(logger: logging.Logger, level: Union[LogLevel, int]) -> None:
    """Update the level of an SDK logger."""
    if logger is None:
        return
    logger.setLevel(int(level))


def truncate(text: str, limit: int = BODY_PREVIEW_LIMIT) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + "...(truncated)"


def describe_body(raw: Optional[bytes], verbose: bool) -> str:
    """
    Render a request/response body for log lines.

    Bodies may carry personal and payment data, so only the size is shown
    unless verbose body logging was enabled explicitly.
    """
    raw = raw or b""
    if not verbose:
        return f"size={len(raw)} bytes"

    pretty = pretty_json(raw)
    if pretty is not None:
        return truncate(pretty)

    if not raw:
        return "<empty>"
    try:
        text = raw.decode('utf-8').strip()
    except UnicodeDecodeError:
        return f"<binary size={len(raw)} bytes>"
    if not text:
        return "<empty>"
    return truncate(text)
