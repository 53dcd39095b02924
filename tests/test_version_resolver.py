"""Tests for version resolution."""

import json
import logging

import pytest

from errors import RegistryError
from versioning.models import ResolutionMode
from versioning.parser import determine_resolution_mode, is_exact_version, parse_spec
from versioning.resolver import fetch_latest_version, resolve_actual_version, resolve_version


class FakeRegistry:
    """Registry double recording every lookup."""

    def __init__(self, answer=None, error=None, latest="1.2.0"):
        self.answer = answer
        self.error = error
        self.latest = latest
        self.queries = []

    def view_versions(self, spec):
        self.queries.append(spec)
        if self.error is not None:
            raise self.error
        return self.answer

    def latest_version(self):
        if self.error is not None:
            raise self.error
        return self.latest


class TestParser:
    """Specifier classification."""

    @pytest.mark.parametrize("spec", ["1.0.0", "10.20.30", "1.0.0-rc.18", "0.0.1-alpha"])
    def test_exact_versions(self, spec):
        assert is_exact_version(spec)
        assert determine_resolution_mode(spec) == ResolutionMode.EXACT

    @pytest.mark.parametrize("spec", ["^1.0.0", "~1.2", "1.x", ">=1.0.0 <2", "next", "1.0"])
    def test_ranges_and_tags(self, spec):
        assert not is_exact_version(spec)
        assert determine_resolution_mode(spec) == ResolutionMode.RANGE

    def test_latest(self):
        assert determine_resolution_mode("latest") == ResolutionMode.LATEST

    def test_parse_spec_trims(self):
        spec = parse_spec("  1.2.3 \n", source="version-file")
        assert spec.raw == "1.2.3"
        assert spec.mode == ResolutionMode.EXACT
        assert spec.source == "version-file"


class TestResolveVersion:
    """resolve_version behavior."""

    def test_latest_passes_through_without_registry(self):
        registry = FakeRegistry(answer="9.9.9")
        assert resolve_version("latest", registry=registry) == "latest"
        assert registry.queries == []

    @pytest.mark.parametrize("version", ["1.0.0", "1.0.0-rc.18", "2.10.3"])
    def test_exact_version_returned_as_is(self, version):
        registry = FakeRegistry(answer="9.9.9")
        assert resolve_version(version, registry=registry) == version
        assert registry.queries == []

    def test_range_resolved_from_single_string(self):
        registry = FakeRegistry(answer="1.0.0-rc.18")
        assert resolve_version("1.x", registry=registry) == "1.0.0-rc.18"
        assert registry.queries == ["1.x"]

    def test_range_resolved_to_last_list_element(self):
        registry = FakeRegistry(answer=["1.0.0", "1.2.0", "1.0.0-rc.18"])
        assert resolve_version("^1.0.0", registry=registry) == "1.0.0-rc.18"

    def test_registry_failure_falls_back_to_spec(self, caplog):
        registry = FakeRegistry(error=RegistryError("npm view failed"))
        with caplog.at_level(logging.WARNING):
            assert resolve_version("^1.0.0", registry=registry) == "^1.0.0"
        assert "Failed to resolve version ^1.0.0" in caplog.text


class TestResolveFromFile:
    """Version files take precedence over the requested specifier."""

    def test_version_file_overrides_latest(self, tmp_path):
        version_file = tmp_path / ".vlt-version"
        version_file.write_text("1.2.3\n", encoding="utf-8")
        registry = FakeRegistry()
        assert resolve_version("latest", str(version_file), registry=registry) == "1.2.3"
        assert registry.queries == []

    def test_version_file_overrides_explicit_request(self, tmp_path):
        version_file = tmp_path / ".vlt-version"
        version_file.write_text("1.2.3", encoding="utf-8")
        assert resolve_version("2.0.0", str(version_file), registry=FakeRegistry()) == "1.2.3"

    def test_engines_range_resolved_through_registry(self, tmp_path):
        manifest = tmp_path / "package.json"
        manifest.write_text(json.dumps({"engines": {"vlt": "^1.0.0"}}), encoding="utf-8")
        registry = FakeRegistry(answer=["1.0.0", "1.2.0", "1.0.0-rc.18"])
        assert resolve_version("latest", str(manifest), registry=registry) == "1.0.0-rc.18"
        assert registry.queries == ["^1.0.0"]

    def test_package_manager_pin_needs_no_registry(self, tmp_path):
        manifest = tmp_path / "package.json"
        manifest.write_text(json.dumps({"packageManager": "vlt@2.0.0"}), encoding="utf-8")
        registry = FakeRegistry(answer="9.9.9")
        assert resolve_version("latest", str(manifest), registry=registry) == "2.0.0"
        assert registry.queries == []

    def test_missing_file_falls_back_to_request(self, tmp_path):
        missing = str(tmp_path / "non" / "existent" / "file")
        assert resolve_version("1.0.0-rc.18", missing, registry=FakeRegistry()) == "1.0.0-rc.18"

    def test_latest_in_file_is_sent_to_registry(self, tmp_path):
        # A file pin goes through exact resolution, so "latest" becomes a dist-tag query.
        version_file = tmp_path / ".vlt-version"
        version_file.write_text("latest", encoding="utf-8")
        registry = FakeRegistry(answer="1.4.0")
        assert resolve_version("1.0.0", str(version_file), registry=registry) == "1.4.0"


class TestHelpers:
    """resolve_actual_version and fetch_latest_version."""

    def test_resolve_actual_version_skips_registry_for_exact(self):
        registry = FakeRegistry(answer="9.9.9")
        assert resolve_actual_version("3.1.4", registry=registry) == "3.1.4"
        assert registry.queries == []

    def test_fetch_latest_version(self):
        assert fetch_latest_version(registry=FakeRegistry(latest="1.7.0")) == "1.7.0"

    def test_fetch_latest_version_failure(self, caplog):
        registry = FakeRegistry(error=RegistryError("offline"))
        with caplog.at_level(logging.WARNING):
            assert fetch_latest_version(registry=registry) == "latest"
        assert "offline" in caplog.text
