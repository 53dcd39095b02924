"""Read a pinned tool version from a version file or a package.json manifest."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from constants import Constants
from .parser import strip_tool_prefix

logger = logging.getLogger(__name__)


def _from_plain_file(path: str, display: str) -> Optional[str]:
    with open(path, encoding="utf-8") as fh:
        content = fh.read().strip()
    if not content:
        logger.warning("Version file %s is empty", display)
        return None
    logger.info("Read %s version from %s: %s", Constants.TOOL_NAME, display, content)
    return content


def _from_manifest(path: str, display: str, tool: str) -> Optional[str]:
    """Return engines.<tool>, else the version in packageManager "<tool>@<version>"."""
    with open(path, encoding="utf-8") as fh:
        manifest: Dict[str, Any] = json.load(fh)
    if not isinstance(manifest, dict):
        raise ValueError("manifest root is not an object")

    engines = manifest.get("engines")
    if isinstance(engines, dict):
        engine_spec = engines.get(tool)
        if isinstance(engine_spec, str) and engine_spec.strip():
            logger.info("Read %s version from %s engines.%s: %s", tool, display, tool, engine_spec)
            return engine_spec.strip()

    package_manager = manifest.get("packageManager")
    if isinstance(package_manager, str) and package_manager.startswith(f"{tool}@"):
        version = strip_tool_prefix(package_manager, tool).strip()
        if version:
            logger.info("Read %s version from %s packageManager: %s", tool, display, version)
            return version

    logger.warning(
        "No %s version found in %s (checked engines.%s and packageManager)",
        tool,
        display,
        tool,
    )
    return None


def read_version_from_file(file_path: str, tool: Optional[str] = None) -> Optional[str]:
    """Read a raw version specifier from ``file_path``.

    Supports plain ``.vlt-version`` files (whole content, trimmed) and
    ``package.json`` manifests. Every failure is logged as a warning and
    reported as None; nothing raised here aborts a run.

    Args:
        file_path: Path as given by the user; resolved against the cwd.
        tool: Tool name looked up in manifests. Defaults to Constants.TOOL_NAME.

    Returns:
        The raw specifier, or None when none could be read.
    """
    tool = tool or Constants.TOOL_NAME
    full_path = os.path.abspath(file_path)

    if not os.path.exists(full_path):
        logger.warning("Version file not found: %s", full_path)
        return None

    try:
        if file_path.endswith(Constants.VERSION_FILE):
            return _from_plain_file(full_path, file_path)
        if file_path.endswith(Constants.PACKAGE_JSON_FILE):
            return _from_manifest(full_path, file_path, tool)
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError
        logger.warning("Failed to read version from %s: %s", file_path, exc)
        return None

    logger.warning("Unsupported version file format: %s", file_path)
    return None
