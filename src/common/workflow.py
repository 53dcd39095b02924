"""Workflow runner I/O: structured outputs, search path, failure reporting.

Follows the GitHub Actions file-command protocol when the runner exposes
GITHUB_OUTPUT / GITHUB_PATH, and degrades to stdout and the process
environment otherwise.
"""

from __future__ import annotations

import logging
import os
import sys
import uuid

from constants import Constants

logger = logging.getLogger(__name__)


def _append_file_command(env_name: str, line: str) -> bool:
    """Append ``line`` to the file named by ``env_name``; False when unset."""
    path = os.environ.get(env_name)
    if not path:
        return False
    with open(path, "a", encoding="utf-8") as fh:
        fh.write(line + os.linesep)
    return True


def format_key_value(name: str, value: str) -> str:
    """Render a file-command entry, using a heredoc delimiter for multi-line values."""
    if "\n" not in value and "\r" not in value:
        return f"{name}={value}"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}"


def set_output(name: str, value: str, stream=None) -> None:
    """Emit a structured run output."""
    line = format_key_value(name, value)
    if not _append_file_command(Constants.ENV_GITHUB_OUTPUT, line):
        print(line, file=stream or sys.stdout)


def add_path(directory: str) -> None:
    """Make ``directory`` searchable for this process and later workflow steps."""
    _append_file_command(Constants.ENV_GITHUB_PATH, directory)
    current = os.environ.get("PATH", "")
    entries = current.split(os.pathsep) if current else []
    if directory not in entries:
        os.environ["PATH"] = os.pathsep.join([directory] + entries)
    logger.info("Added %s to PATH", directory)


def set_failed(message: str) -> None:
    """Log the single terminal failure line for a run."""
    logger.error("%s", message)
