"""Logging helpers for commit-canvas commands."""

from __future__ import annotations

import logging
import re
from pathlib import Path

_LOGGER_NAME = "commit_canvas"
_CREDENTIAL_URL_RE = re.compile(r"(https?://)[^/@\s]+@")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the commit_canvas hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def redact(text: str) -> str:
    """Mask credentials embedded in ``https://<token>@host`` style URLs."""
    return _CREDENTIAL_URL_RE.sub(r"\1***@", text)


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Configure the package logger with console output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # The CLI may be invoked several times in one process (tests).
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[commit-canvas] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger", "redact"]
