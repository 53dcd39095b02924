"""Shared fixtures: a scripted command runner and an isolated runner environment."""

import os
import sys

import pytest

from common.command_runner import CommandResult

PREFIX = "/opt/npm-global"
BIN_DIR = os.path.join(PREFIX, "bin")
ROOT_DIR = os.path.join(PREFIX, "lib", "node_modules")


class FakeRunner:
    """CommandRunner that answers from a table and records every call.

    Responses are keyed by the full command tuple. A response may be a
    CommandResult, a string (stdout of a successful run) or a callable taking
    the command and returning either. Unknown commands behave like a missing
    executable.
    """

    def __init__(self, responses=None):
        self.calls = []
        self.responses = dict(responses or {})

    def set(self, command, stdout="", returncode=0, stderr=""):
        self.responses[tuple(command)] = CommandResult(tuple(command), returncode, stdout, stderr)

    def run(self, command, *, cwd=None):
        key = tuple(command)
        self.calls.append(key)
        response = self.responses.get(key)
        if callable(response):
            response = response(key)
        if response is None:
            return CommandResult(key, 127, "", f"{key[0]}: command not found")
        if isinstance(response, str):
            return CommandResult(key, 0, response, "")
        return response

    def called(self, *prefix):
        return any(call[: len(prefix)] == prefix for call in self.calls)


@pytest.fixture
def fake_runner():
    runner = FakeRunner()
    runner.set(["npm", "prefix", "-g"], stdout=PREFIX + "\n")
    runner.set(["npm", "root", "-g"], stdout=ROOT_DIR + "\n")
    runner.bin_dir = BIN_DIR
    runner.root_dir = ROOT_DIR
    return runner


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep workflow file commands, action inputs and PATH edits inside the test."""
    for name in list(os.environ):
        if name.startswith(("INPUT_", "STATE_")):
            monkeypatch.delenv(name, raising=False)
    for name in ("GITHUB_OUTPUT", "GITHUB_PATH", "GITHUB_STATE", "SETUP_VLT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))
    monkeypatch.setattr("installer.npm._is_windows", lambda: False)


@pytest.fixture
def corrupt_executable(tmp_path):
    """An executable file whose contents the OS cannot run (ENOEXEC)."""
    if sys.platform == "win32":
        pytest.skip("exec format errors are POSIX-specific")
    path = tmp_path / "broken-bin" / "vlt"
    path.parent.mkdir()
    path.write_bytes(b"\x00\x01garbage")
    path.chmod(0o755)
    return str(path)
