"""Injectable command execution used for every package manager and tool call."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from common.logging_utils import Timer, extra_context, is_debug_enabled, redact
from errors import CommandError

logger = logging.getLogger(__name__)

# Conventional shell exit statuses for "command not found" and "cannot execute".
MISSING_EXECUTABLE_RC = 127
NOT_EXECUTABLE_RC = 126


@dataclass(frozen=True)
class CommandResult:
    """Normalized subprocess execution result."""

    command: tuple
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Runs a command and returns its captured output."""

    def run(self, command: Sequence[str], *, cwd: Optional[str] = None) -> CommandResult: ...


class SubprocessCommandRunner:
    """Default command runner backed by ``subprocess.run``.

    A missing executable is reported as returncode 127 and any other exec
    failure (bad format, permissions) as 126 rather than raised, so callers
    see a single failure shape. Output is decoded as UTF-8 with replacement.
    """

    def run(self, command: Sequence[str], *, cwd: Optional[str] = None) -> CommandResult:
        printable = redact(" ".join(command))
        with Timer() as t:
            try:
                completed = subprocess.run(
                    list(command),
                    cwd=cwd,
                    check=False,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            except OSError as exc:
                logger.debug("Command not runnable: %s (%s)", printable, exc)
                return CommandResult(
                    command=tuple(command),
                    returncode=(
                        MISSING_EXECUTABLE_RC
                        if isinstance(exc, FileNotFoundError)
                        else NOT_EXECUTABLE_RC
                    ),
                    stdout="",
                    stderr=str(exc),
                )
        if is_debug_enabled(logger):
            logger.debug(
                "Command finished",
                extra=extra_context(
                    event="command",
                    component="command_runner",
                    action=command[0] if command else None,
                    outcome="success" if completed.returncode == 0 else "failure",
                    returncode=completed.returncode,
                    duration_ms=t.duration_ms(),
                    target=printable,
                ),
            )
        return CommandResult(
            command=tuple(command),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def run_checked(
    runner: CommandRunner, command: Sequence[str], *, cwd: Optional[str] = None
) -> CommandResult:
    """Run ``command`` and raise CommandError unless it exits zero."""
    result = runner.run(command, cwd=cwd)
    if not result.ok:
        raise CommandError(
            command=result.command,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return result
