"""Content cache backends keyed by an opaque string.

A backend stores a list of directory trees under one key and can
re-materialize them in place later.
"""

from __future__ import annotations

import io
import json
import logging
import os
import shutil
import tarfile
import tempfile
from typing import List, Optional, Protocol, Sequence

from constants import Constants

logger = logging.getLogger(__name__)

_MANIFEST_NAME = "manifest.json"
_ARCHIVE_SUFFIX = ".tar.gz"


class CacheBackend(Protocol):
    """Restore/save directory trees under a key."""

    def restore(self, paths: Sequence[str], key: str) -> bool:
        """Materialize the entry for ``key`` into ``paths``; False when absent."""
        ...

    def save(self, paths: Sequence[str], key: str) -> None:
        """Persist ``paths`` under ``key``."""
        ...


class LocalArchiveCache:
    """One gzip tar archive per key under a cache root directory.

    Entries are immutable: saving a key that already exists is a no-op.
    Each tree is stored under its index in ``paths`` alongside a manifest of
    the original locations.
    """

    def __init__(self, root: Optional[str] = None) -> None:
        self._root = os.path.abspath(os.path.expanduser(root or Constants.CACHE_DIR))

    @property
    def root(self) -> str:
        return self._root

    def archive_path(self, key: str) -> str:
        if not key or os.sep in key or (os.altsep and os.altsep in key):
            raise ValueError(f"invalid cache key: {key!r}")
        return os.path.join(self._root, key + _ARCHIVE_SUFFIX)

    def has(self, key: str) -> bool:
        return os.path.isfile(self.archive_path(key))

    def restore(self, paths: Sequence[str], key: str) -> bool:
        archive = self.archive_path(key)
        if not os.path.isfile(archive):
            return False

        with tarfile.open(archive, "r:gz") as tar, tempfile.TemporaryDirectory() as staging:
            manifest = self._read_manifest(tar)
            if len(manifest) != len(paths):
                logger.debug(
                    "Cache entry %s holds %d paths, %d requested", key, len(manifest), len(paths)
                )
                return False
            if hasattr(tarfile, "data_filter"):
                tar.extractall(staging, filter="data")
            else:  # pragma: no cover - interpreters without extraction filters
                tar.extractall(staging)  # nosec B202

            for index, destination in enumerate(paths):
                source = os.path.join(staging, str(index))
                if not os.path.isdir(source):
                    continue
                os.makedirs(destination, exist_ok=True)
                shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
        return True

    def save(self, paths: Sequence[str], key: str) -> None:
        archive = self.archive_path(key)
        if os.path.isfile(archive):
            logger.debug("Cache entry %s already exists; not overwriting", key)
            return
        for path in paths:
            if not os.path.isdir(path):
                raise FileNotFoundError(f"cache path is not a directory: {path}")

        os.makedirs(self._root, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._root, suffix=".tmp")
        os.close(fd)
        try:
            with tarfile.open(tmp_path, "w:gz") as tar:
                for index, path in enumerate(paths):
                    tar.add(path, arcname=str(index))
                self._write_manifest(tar, paths)
            os.replace(tmp_path, archive)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @staticmethod
    def _write_manifest(tar: tarfile.TarFile, paths: Sequence[str]) -> None:
        payload = json.dumps({"paths": [os.path.abspath(p) for p in paths]}).encode("utf-8")
        info = tarfile.TarInfo(_MANIFEST_NAME)
        info.size = len(payload)
        tar.addfile(info, io.BytesIO(payload))

    @staticmethod
    def _read_manifest(tar: tarfile.TarFile) -> List[str]:
        try:
            member = tar.getmember(_MANIFEST_NAME)
        except KeyError as exc:
            raise ValueError("cache archive has no manifest") from exc
        handle = tar.extractfile(member)
        if handle is None:
            raise ValueError("cache archive manifest is unreadable")
        data = json.loads(handle.read().decode("utf-8"))
        paths = data.get("paths") if isinstance(data, dict) else None
        if not isinstance(paths, list):
            raise ValueError("cache archive manifest is malformed")
        return [str(p) for p in paths]
