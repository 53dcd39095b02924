"""Tests for cache keys, the best-effort gateway and the local archive backend."""

import logging
import os

import pytest

from cache import CacheGateway, CacheStatus, LocalArchiveCache, cache_key
from cache import gateway as gateway_module


class ExplodingBackend:
    """Backend whose every operation fails."""

    def restore(self, paths, key):
        raise OSError("cache service unavailable")

    def save(self, paths, key):
        raise OSError("disk full")


class RecordingBackend:
    """Backend that remembers saves and serves them back."""

    def __init__(self):
        self.entries = {}
        self.restores = []

    def restore(self, paths, key):
        self.restores.append((tuple(paths), key))
        return key in self.entries

    def save(self, paths, key):
        self.entries[key] = tuple(paths)


class TestCacheKey:
    """cache_key derivation."""

    def test_latest_has_no_key(self):
        assert cache_key("latest") == ""
        assert cache_key("") == ""

    @pytest.mark.parametrize("spec", ["^1.0.0", "1.x", "next", "1.0"])
    def test_unresolved_specifiers_have_no_key(self, spec):
        assert cache_key(spec, platform="linux", arch="x64") == ""

    def test_exact_version_key(self):
        assert cache_key("1.0.0", platform="linux", arch="x64") == "setup-vlt-1.0.0-linux-x64"

    def test_key_is_deterministic(self):
        assert cache_key("1.0.0") == cache_key("1.0.0")
        assert cache_key("1.0.0") != ""

    def test_distinct_versions_do_not_collide(self):
        assert cache_key("1.0.0") != cache_key("1.0.1")
        assert cache_key("1.0.0") != cache_key("1.0.0-rc.1")

    def test_platform_and_arch_are_part_of_the_key(self):
        assert cache_key("1.0.0", "linux", "x64") != cache_key("1.0.0", "darwin", "x64")
        assert cache_key("1.0.0", "linux", "x64") != cache_key("1.0.0", "linux", "arm64")

    @pytest.mark.parametrize(
        "machine, expected",
        [("x86_64", "x64"), ("AMD64", "x64"), ("aarch64", "arm64"), ("i686", "ia32"), ("riscv64", "riscv64")],
    )
    def test_arch_names_follow_node(self, monkeypatch, machine, expected):
        monkeypatch.setattr(gateway_module._platform, "machine", lambda: machine)
        assert gateway_module.current_arch() == expected


class TestCacheGateway:
    """Best-effort restore/save."""

    def test_restore_hit_and_miss(self):
        backend = RecordingBackend()
        backend.entries["k1"] = ("/a",)
        gateway = CacheGateway(backend)
        assert gateway.restore(["/a"], "k1").status is CacheStatus.HIT
        assert gateway.restore(["/a"], "k2").status is CacheStatus.MISS

    def test_restore_failure_is_a_miss(self, caplog):
        gateway = CacheGateway(ExplodingBackend())
        with caplog.at_level(logging.WARNING):
            outcome = gateway.restore(["/a"], "k1")
        assert outcome.status is CacheStatus.ERROR
        assert not outcome.hit
        assert "cache service unavailable" in caplog.text

    def test_save_failure_does_not_raise(self, caplog):
        gateway = CacheGateway(ExplodingBackend())
        with caplog.at_level(logging.WARNING):
            outcome = gateway.save(["/a"], "k1")
        assert outcome.status is CacheStatus.ERROR
        assert "disk full" in caplog.text

    def test_empty_key_is_skipped(self):
        backend = RecordingBackend()
        gateway = CacheGateway(backend)
        assert gateway.restore(["/a"], "").status is CacheStatus.SKIPPED
        assert gateway.save(["/a"], "").status is CacheStatus.SKIPPED
        assert backend.restores == []
        assert backend.entries == {}


class TestLocalArchiveCache:
    """Archive backend on a real filesystem."""

    def _make_tree(self, base):
        bin_dir = base / "bin"
        pkg_dir = base / "lib" / "node_modules" / "vlt"
        (pkg_dir / "dist").mkdir(parents=True)
        bin_dir.mkdir(parents=True)
        (pkg_dir / "dist" / "cli.js").write_text("console.log('vlt')\n", encoding="utf-8")
        (pkg_dir / "package.json").write_text('{"version": "1.0.0"}', encoding="utf-8")
        (bin_dir / "vlt").write_text("#!/bin/sh\n", encoding="utf-8")
        return [str(bin_dir), str(pkg_dir)]

    def test_save_then_restore_materializes_trees(self, tmp_path):
        paths = self._make_tree(tmp_path / "prefix")
        backend = LocalArchiveCache(str(tmp_path / "cache"))
        backend.save(paths, "setup-vlt-1.0.0-linux-x64")
        assert backend.has("setup-vlt-1.0.0-linux-x64")

        for path in paths:
            for root, _dirs, files in os.walk(path):
                for name in files:
                    os.remove(os.path.join(root, name))

        assert backend.restore(paths, "setup-vlt-1.0.0-linux-x64") is True
        assert (tmp_path / "prefix" / "bin" / "vlt").read_text(encoding="utf-8") == "#!/bin/sh\n"
        cli = tmp_path / "prefix" / "lib" / "node_modules" / "vlt" / "dist" / "cli.js"
        assert cli.read_text(encoding="utf-8") == "console.log('vlt')\n"

    def test_restore_unknown_key(self, tmp_path):
        backend = LocalArchiveCache(str(tmp_path / "cache"))
        assert backend.restore([str(tmp_path / "bin")], "setup-vlt-2.0.0-linux-x64") is False

    def test_existing_entry_is_not_overwritten(self, tmp_path):
        paths = self._make_tree(tmp_path / "prefix")
        backend = LocalArchiveCache(str(tmp_path / "cache"))
        backend.save(paths, "key")
        archive = backend.archive_path("key")
        first = os.path.getmtime(archive)
        os.utime(archive, (first - 100, first - 100))
        backend.save(paths, "key")
        assert os.path.getmtime(archive) == first - 100

    def test_save_missing_path_raises_and_leaves_no_entry(self, tmp_path):
        backend = LocalArchiveCache(str(tmp_path / "cache"))
        with pytest.raises(FileNotFoundError):
            backend.save([str(tmp_path / "missing")], "key")
        assert not backend.has("key")
        assert not os.path.exists(backend.root) or os.listdir(backend.root) == []

    def test_path_count_mismatch_is_a_miss(self, tmp_path):
        paths = self._make_tree(tmp_path / "prefix")
        backend = LocalArchiveCache(str(tmp_path / "cache"))
        backend.save(paths, "key")
        assert backend.restore(paths[:1], "key") is False

    def test_keys_with_separators_are_rejected(self, tmp_path):
        backend = LocalArchiveCache(str(tmp_path / "cache"))
        with pytest.raises(ValueError):
            backend.archive_path("../escape")

    def test_gateway_round_trip(self, tmp_path):
        paths = self._make_tree(tmp_path / "prefix")
        gateway = CacheGateway(LocalArchiveCache(str(tmp_path / "cache")))
        assert gateway.save(paths, "setup-vlt-1.0.0-linux-x64").status is CacheStatus.SAVED
        assert gateway.restore(paths, "setup-vlt-1.0.0-linux-x64").hit
