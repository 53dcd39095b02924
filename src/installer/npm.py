"""Global installs through npm and location of npm's global bin directory."""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional

from common.command_runner import CommandRunner, run_checked
from common.logging_utils import safe_url
from constants import Constants
from errors import CommandError, InstallError

logger = logging.getLogger(__name__)


def _is_windows() -> bool:
    return sys.platform == "win32"


def global_bin_path(runner: CommandRunner, npm: Optional[str] = None) -> str:
    """Return the directory npm links global executables into.

    ``npm bin -g`` no longer exists in current npm, so the global prefix is
    used: ``<prefix>/bin`` on POSIX and the prefix itself on Windows.

    Raises:
        CommandError: if npm cannot report its prefix.
    """
    npm = npm or Constants.PACKAGE_MANAGER
    prefix = run_checked(runner, [npm, "prefix", "-g"]).stdout.strip()
    if _is_windows():
        return prefix
    return os.path.join(prefix, "bin")


def global_root_path(runner: CommandRunner, npm: Optional[str] = None) -> str:
    """Return npm's global node_modules directory (``npm root -g``)."""
    npm = npm or Constants.PACKAGE_MANAGER
    return run_checked(runner, [npm, "root", "-g"]).stdout.strip()


def cache_paths(runner: CommandRunner, tool: Optional[str] = None) -> List[str]:
    """Directory trees making up an installed tool: the global bin dir and its package dir.

    The bin directory alone holds only launchers that point into node_modules.
    """
    tool = tool or Constants.TOOL_NAME
    return [global_bin_path(runner), os.path.join(global_root_path(runner), tool)]


def tool_path(bin_dir: str, tool: Optional[str] = None) -> str:
    """Path of the tool's launcher inside ``bin_dir``."""
    tool = tool or Constants.TOOL_NAME
    name = f"{tool}.cmd" if _is_windows() else tool
    return os.path.join(bin_dir, name)


def install_command(
    version: str,
    registry_url: Optional[str] = None,
    *,
    tool: Optional[str] = None,
    npm: Optional[str] = None,
) -> List[str]:
    """Build ``npm install -g <tool>@<version> [--registry <url>]``."""
    tool = tool or Constants.TOOL_NAME
    command = [npm or Constants.PACKAGE_MANAGER, "install", "-g", f"{tool}@{version}"]
    if registry_url:
        command.extend(["--registry", registry_url])
    return command


def install_tool(
    version: str,
    registry_url: Optional[str],
    runner: CommandRunner,
    tool: Optional[str] = None,
) -> None:
    """Install ``<tool>@<version>`` globally. ``latest`` is passed through verbatim.

    Raises:
        InstallError: on any installer failure; no retry is attempted.
    """
    tool = tool or Constants.TOOL_NAME
    command = install_command(version, registry_url, tool=tool)
    if registry_url:
        logger.info("Using custom registry: %s", safe_url(registry_url))
    logger.info("Installing %s@%s...", tool, version)
    try:
        run_checked(runner, command)
    except CommandError as exc:
        raise InstallError(tool, version, exc) from exc
    logger.info("%s installed successfully", tool)
