"""Data models for version resolution and setup results."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResolutionMode(Enum):
    """Resolution strategy derived from the specifier."""
    EXACT = "exact"
    RANGE = "range"
    LATEST = "latest"


@dataclass(frozen=True)
class VersionSpec:
    """Normalized representation of a version specifier."""
    raw: str
    mode: ResolutionMode
    source: str  # "input" | "version-file" | "package.json"


@dataclass(frozen=True)
class SetupResult:
    """Outcome of the main phase, produced once per run."""
    resolved_version: str
    installed_version: str
    installed_path: str
    cache_hit: bool


@dataclass(frozen=True)
class HandoffState:
    """Values the main phase leaves behind for the post phase."""
    vlt_version: Optional[str]
    cache_hit: bool
    no_cache: bool
