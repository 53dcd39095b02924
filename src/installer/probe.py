"""Installed-tool probes built on ``<tool> --version``."""

from __future__ import annotations

import logging
from typing import Optional

from common.command_runner import CommandRunner, run_checked
from constants import Constants
from errors import CommandError, VerificationError

logger = logging.getLogger(__name__)


def installed_version(runner: CommandRunner, tool: Optional[str] = None) -> Optional[str]:
    """Return the version reported by the tool, or None when it is not installed.

    A missing binary or a non-zero exit is "not installed", never an error.
    """
    tool = tool or Constants.TOOL_NAME
    try:
        version = run_checked(runner, [tool, "--version"]).stdout.strip()
    except CommandError as exc:
        logger.debug("%s is not installed: %s", tool, exc)
        return None
    return version or None


def verify_installation(runner: CommandRunner, tool: Optional[str] = None) -> str:
    """Run the tool once and return its version.

    Raises:
        VerificationError: if the tool cannot be executed or reports nothing.
    """
    tool = tool or Constants.TOOL_NAME
    try:
        version = run_checked(runner, [tool, "--version"]).stdout.strip()
    except CommandError as exc:
        raise VerificationError(tool, exc) from exc
    if not version:
        raise VerificationError(tool, "no version reported")
    logger.info("%s %s is installed and working", tool, version)
    return version
