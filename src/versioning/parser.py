"""Specifier parsing utilities for version resolution."""

import re

from constants import Constants
from .models import ResolutionMode, VersionSpec

_EXACT_RE = re.compile(Constants.EXACT_VERSION_PATTERN)


def is_latest(spec: str) -> bool:
    """Return True for the ``latest`` sentinel."""
    return spec == Constants.LATEST


def is_exact_version(spec: str) -> bool:
    """Return True when ``spec`` is a literal MAJOR.MINOR.PATCH[-PRERELEASE]."""
    return bool(_EXACT_RE.match(spec))


def determine_resolution_mode(spec: str) -> ResolutionMode:
    """Classify a specifier as latest, exact or a range/tag for the registry."""
    if is_latest(spec):
        return ResolutionMode.LATEST
    if is_exact_version(spec):
        return ResolutionMode.EXACT
    return ResolutionMode.RANGE


def parse_spec(raw: str, source: str = "input") -> VersionSpec:
    """Construct a VersionSpec, trimming surrounding whitespace."""
    spec = raw.strip()
    return VersionSpec(raw=spec, mode=determine_resolution_mode(spec), source=source)


def strip_tool_prefix(value: str, tool: str) -> str:
    """Turn ``"<tool>@<version>"`` into ``"<version>"``; other values are returned unchanged."""
    prefix = f"{tool}@"
    if value.startswith(prefix):
        return value[len(prefix):]
    return value
