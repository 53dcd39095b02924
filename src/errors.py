"""Exception hierarchy for setup-vlt.

Fatal failures derive from SetupVltError and are reported once by the entry
point. Recoverable failures are caught where they happen and logged.
"""

from __future__ import annotations

from typing import Sequence


class SetupVltError(RuntimeError):
    """Base error for a failed run."""


class CommandError(SetupVltError):
    """Raised when an external command is missing or exits non-zero."""

    def __init__(
        self,
        *,
        command: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip() or stdout.strip()
        message = f"command failed ({returncode}): {' '.join(command)}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RegistryError(SetupVltError):
    """Raised when a registry lookup cannot produce a usable answer."""


class InstallError(SetupVltError):
    """Raised when the package manager fails to install the tool."""

    def __init__(self, tool: str, version: str, detail: object) -> None:
        self.tool = tool
        self.version = version
        super().__init__(f"Failed to install {tool}@{version}: {detail}")


class VerificationError(SetupVltError):
    """Raised when the tool cannot be executed after installation."""

    def __init__(self, tool: str, detail: object) -> None:
        self.tool = tool
        super().__init__(f"{tool} installation verification failed: {detail}")
