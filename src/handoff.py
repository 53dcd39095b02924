"""Durable key/value handoff between the main and post phases.

The two phases are separate processes. The main phase writes its state once;
the post phase reads it back. A JSON file is the primary store; under GitHub
Actions the GITHUB_STATE file command is written as well and STATE_<name>
environment variables are consulted on read.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Dict, Mapping, Optional

from common.workflow import format_key_value
from constants import Constants, StateKeys
from versioning.models import HandoffState

logger = logging.getLogger(__name__)


class HandoffStore:
    """String-to-string map persisted at ``path``."""

    def __init__(self, path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> None:
        self._path = os.path.abspath(os.path.expanduser(path or Constants.STATE_FILE))
        self._environ = environ if environ is not None else os.environ

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> Dict[str, str]:
        """Return every stored value; a missing or unreadable file is empty."""
        if not os.path.isfile(self._path):
            return {}
        try:
            with open(self._path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, name: str) -> Optional[str]:
        value = self.load().get(name)
        if value is None:
            value = self._environ.get(Constants.ENV_STATE_PREFIX + name)
        return value

    def save(self, values: Mapping[str, str]) -> None:
        """Merge ``values`` into the store with an atomic file replace."""
        merged = self.load()
        merged.update({k: str(v) for k, v in values.items()})

        directory = os.path.dirname(self._path)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(merged, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        state_file = self._environ.get(Constants.ENV_GITHUB_STATE)
        if state_file:
            with open(state_file, "a", encoding="utf-8") as fh:
                for name, value in values.items():
                    fh.write(format_key_value(name, str(value)) + os.linesep)


def _as_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


def write_handoff(store: HandoffStore, state: HandoffState) -> None:
    """Persist the main phase results for the post phase."""
    store.save(
        {
            StateKeys.VLT_VERSION.value: state.vlt_version or "",
            StateKeys.CACHE_HIT.value: str(state.cache_hit).lower(),
            StateKeys.NO_CACHE.value: str(state.no_cache).lower(),
        }
    )


def read_handoff(store: HandoffStore) -> HandoffState:
    """Read the main phase results; vlt_version is None when never written."""
    version = store.get(StateKeys.VLT_VERSION.value)
    return HandoffState(
        vlt_version=version or None,
        cache_hit=_as_bool(store.get(StateKeys.CACHE_HIT.value)),
        no_cache=_as_bool(store.get(StateKeys.NO_CACHE.value)),
    )


def clear_handoff(store: HandoffStore) -> None:
    """Blank the main phase results so a failed run leaves nothing to save."""
    write_handoff(store, HandoffState(vlt_version=None, cache_hit=False, no_cache=False))
