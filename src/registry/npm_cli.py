"""Registry backend that shells out to ``npm view``."""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from common.command_runner import CommandRunner, SubprocessCommandRunner, run_checked
from constants import Constants
from errors import CommandError, RegistryError

from .base import VersionsAnswer, coerce_answer

logger = logging.getLogger(__name__)


class NpmViewRegistry:
    """Resolve specifiers with ``npm view <tool>@<spec> version --json``."""

    def __init__(
        self,
        *,
        runner: Optional[CommandRunner] = None,
        registry_url: Optional[str] = None,
        tool: Optional[str] = None,
        npm: Optional[str] = None,
    ) -> None:
        self._runner = runner or SubprocessCommandRunner()
        self._registry_url = registry_url
        self._tool = tool or Constants.TOOL_NAME
        self._npm = npm or Constants.PACKAGE_MANAGER

    def _view(self, spec: str, json_output: bool) -> str:
        command: List[str] = [self._npm, "view", f"{self._tool}@{spec}", "version"]
        if json_output:
            command.append("--json")
        if self._registry_url:
            command.extend(["--registry", self._registry_url])
        try:
            return run_checked(self._runner, command).stdout.strip()
        except CommandError as exc:
            raise RegistryError(str(exc)) from exc

    def view_versions(self, spec: str) -> VersionsAnswer:
        output = self._view(spec, json_output=True)
        try:
            return coerce_answer(json.loads(output), spec)
        except ValueError as exc:  # includes json.JSONDecodeError
            raise RegistryError(f"unexpected npm view output for {self._tool}@{spec}: {exc}") from exc

    def latest_version(self) -> str:
        output = self._view(Constants.LATEST, json_output=False)
        if not output:
            raise RegistryError(f"npm view returned no version for {self._tool}@latest")
        return output
