"""Tests for workflow outputs, PATH updates and failure reporting."""

import io
import logging
import os

from common import workflow


class TestSetOutput:
    """set_output file command and stdout fallback."""

    def test_writes_output_file(self, tmp_path, monkeypatch):
        out = tmp_path / "github_output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(out))
        workflow.set_output("vlt-version", "1.0.0")
        workflow.set_output("cache-hit", "false")
        assert out.read_text(encoding="utf-8").splitlines() == [
            "vlt-version=1.0.0",
            "cache-hit=false",
        ]

    def test_falls_back_to_stream(self):
        stream = io.StringIO()
        workflow.set_output("vlt-path", "/opt/bin/vlt", stream=stream)
        assert stream.getvalue() == "vlt-path=/opt/bin/vlt\n"

    def test_multiline_value_uses_delimiter(self):
        rendered = workflow.format_key_value("notes", "line one\nline two")
        header, body = rendered.split(os.linesep, 1)
        name, delimiter = header.split("<<")
        assert name == "notes"
        assert body.startswith("line one\nline two")
        assert body.endswith(delimiter)


class TestAddPath:
    """add_path behavior."""

    def test_prepends_to_process_path(self, monkeypatch):
        monkeypatch.setenv("PATH", os.pathsep.join(["/usr/bin", "/bin"]))
        workflow.add_path("/opt/vlt/bin")
        assert os.environ["PATH"].split(os.pathsep) == ["/opt/vlt/bin", "/usr/bin", "/bin"]

    def test_does_not_duplicate_entries(self, monkeypatch):
        monkeypatch.setenv("PATH", "/opt/vlt/bin")
        workflow.add_path("/opt/vlt/bin")
        assert os.environ["PATH"] == "/opt/vlt/bin"

    def test_appends_to_path_file(self, tmp_path, monkeypatch, caplog):
        path_file = tmp_path / "github_path"
        monkeypatch.setenv("GITHUB_PATH", str(path_file))
        with caplog.at_level(logging.INFO):
            workflow.add_path("/opt/vlt/bin")
        assert path_file.read_text(encoding="utf-8").splitlines() == ["/opt/vlt/bin"]
        assert "Added /opt/vlt/bin to PATH" in caplog.text


def test_set_failed_logs_an_error(caplog):
    workflow.set_failed("Action failed: boom")
    assert caplog.records[-1].levelno == logging.ERROR
    assert caplog.records[-1].getMessage() == "Action failed: boom"
