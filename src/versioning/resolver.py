"""Resolve a requested specifier to ``latest`` or one exact version."""

from __future__ import annotations

import logging
from typing import Optional

from constants import Constants
from errors import RegistryError
from registry import Registry

from .models import ResolutionMode
from .parser import is_latest, parse_spec
from .version_file import read_version_from_file

logger = logging.getLogger(__name__)


def resolve_version(
    requested: str,
    version_file: Optional[str] = None,
    *,
    registry: Registry,
) -> str:
    """Resolve the version to install.

    A specifier read from ``version_file`` always wins over ``requested``.
    ``latest`` passes through untouched for the installer to resolve; exact
    versions pass through without a registry call; anything else is asked of
    the registry.

    Args:
        requested: Specifier from the run inputs (exact, range, tag or "latest").
        version_file: Optional .vlt-version or package.json path.
        registry: Backend used for range/tag lookups.

    Returns:
        "latest" or the resolved version. When the registry cannot answer, the
        original specifier is returned unchanged.
    """
    if version_file:
        pinned = read_version_from_file(version_file)
        if pinned:
            logger.debug("Using %s pin from %s", Constants.TOOL_NAME, version_file)
            return resolve_actual_version(pinned, registry=registry)

    if is_latest(requested):
        return requested

    return resolve_actual_version(requested, registry=registry)


def resolve_actual_version(spec: str, *, registry: Registry) -> str:
    """Resolve a range or tag to an exact version via the registry.

    Registry list answers are taken to be in ascending release order and the
    last element is picked.
    """
    parsed = parse_spec(spec)
    if parsed.mode == ResolutionMode.EXACT:
        return parsed.raw
    spec = parsed.raw

    try:
        answer = registry.view_versions(spec)
    except RegistryError as exc:
        logger.warning("Failed to resolve version %s via registry: %s", spec, exc)
        return spec

    resolved = answer[-1] if isinstance(answer, list) else answer
    logger.info("Resolved %s@%s to %s", Constants.TOOL_NAME, spec, resolved)
    return resolved


def fetch_latest_version(*, registry: Registry) -> str:
    """Return the version behind the latest dist-tag, or "latest" when unknown."""
    try:
        return registry.latest_version()
    except RegistryError as exc:
        logger.warning("Failed to fetch latest %s version: %s", Constants.TOOL_NAME, exc)
        return Constants.LATEST
