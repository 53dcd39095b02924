"""Logging helpers shared by every module.

Provides one-time root logger configuration, structured ``extra`` payloads for
DEBUG traces, and redaction of credentials embedded in registry URLs.
"""

from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_CONFIGURED_MARKER = "_setup_vlt_handler"
_TOKEN_PATTERN = re.compile(r"(?i)(_authToken|token|password|secret)=([^&\s]+)")


def configure_logging(level: Optional[str] = None) -> None:
    """Install the console handler on the root logger exactly once.

    Args:
        level: Optional level name. Falls back to the SETUP_VLT_LOG_LEVEL
            environment variable, then INFO.
    """
    root = logging.getLogger()
    if not any(getattr(h, _CONFIGURED_MARKER, False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        setattr(handler, _CONFIGURED_MARKER, True)
        root.addHandler(handler)

    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))


def add_file_handler(path: str) -> None:
    """Mirror log records into ``path``."""
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(Constants.FILE_LOG_FORMAT))
    logging.getLogger().addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped so records only carry populated fields.
    """
    return {k: v for k, v in fields.items() if v is not None}


def redact(text: str) -> str:
    """Mask token-like query/config values in ``text``."""
    if not text:
        return text
    return _TOKEN_PATTERN.sub(lambda m: f"{m.group(1)}=[REDACTED]", text)


def safe_url(url: Optional[str]) -> str:
    """Return ``url`` with userinfo and token-like parameters removed."""
    if not url:
        return ""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc
    if "@" in netloc:
        netloc = "[REDACTED]@" + netloc.rsplit("@", 1)[1]
    return redact(urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment)))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 2)
