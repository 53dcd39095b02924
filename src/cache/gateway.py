"""Cache keys and best-effort restore/save of the installed tool.

CacheGateway never raises: every backend failure is reported through a
CacheOutcome that callers log and move past.
"""

from __future__ import annotations

import logging
import platform as _platform
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from constants import Constants
from versioning.parser import is_exact_version

from .backend import CacheBackend

logger = logging.getLogger(__name__)

# Node.js style architecture names keep keys stable across tooling.
_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}


class CacheStatus(Enum):
    """Result of a cache operation."""
    HIT = "hit"
    MISS = "miss"
    SAVED = "saved"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class CacheOutcome:
    """Status of a restore/save attempt."""
    status: CacheStatus
    key: str
    message: str = ""

    @property
    def hit(self) -> bool:
        return self.status is CacheStatus.HIT


def current_platform() -> str:
    return sys.platform


def current_arch() -> str:
    machine = _platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine or "unknown")


def cache_key(
    version: str,
    platform: Optional[str] = None,
    arch: Optional[str] = None,
) -> str:
    """Return ``<prefix>-<version>-<platform>-<arch>``, or "" unless ``version`` is exact.

    ``latest`` and ranges left unresolved by a registry failure are never cached.
    """
    if not version or not is_exact_version(version):
        return ""
    return "-".join(
        [
            Constants.CACHE_KEY_PREFIX,
            version,
            platform or current_platform(),
            arch or current_arch(),
        ]
    )


class CacheGateway:
    """Wraps a CacheBackend with the best-effort contract."""

    def __init__(self, backend: CacheBackend) -> None:
        self._backend = backend

    def restore(self, paths: Sequence[str], key: str) -> CacheOutcome:
        if not key:
            return CacheOutcome(CacheStatus.SKIPPED, key, "no cache key")
        try:
            found = self._backend.restore(list(paths), key)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to restore cache entry %s: %s", key, exc)
            return CacheOutcome(CacheStatus.ERROR, key, str(exc))
        if found:
            return CacheOutcome(CacheStatus.HIT, key)
        return CacheOutcome(CacheStatus.MISS, key)

    def save(self, paths: Sequence[str], key: str) -> CacheOutcome:
        if not key:
            return CacheOutcome(CacheStatus.SKIPPED, key, "no cache key")
        try:
            self._backend.save(list(paths), key)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to save %s installation to cache: %s", Constants.TOOL_NAME, exc)
            return CacheOutcome(CacheStatus.ERROR, key, str(exc))
        return CacheOutcome(CacheStatus.SAVED, key)
