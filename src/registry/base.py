"""Registry query contract shared by the npm CLI and HTTP backends."""

from __future__ import annotations

from typing import List, Protocol, Union

# A registry answers a range/tag query with one version or an ordered list.
VersionsAnswer = Union[str, List[str]]


class Registry(Protocol):
    """Looks up published versions of the tool."""

    def view_versions(self, spec: str) -> VersionsAnswer:
        """Return the version(s) satisfying ``spec``.

        Raises:
            RegistryError: when the registry cannot be queried or answers
                with something that is not a version string/list.
        """
        ...

    def latest_version(self) -> str:
        """Return the version the ``latest`` dist-tag points at."""
        ...


def coerce_answer(payload: object, spec: str) -> VersionsAnswer:
    """Validate a decoded registry payload.

    Raises:
        ValueError: if the payload is neither a string nor a non-empty list of strings.
    """
    if isinstance(payload, str) and payload:
        return payload
    if isinstance(payload, list) and payload and all(isinstance(v, str) for v in payload):
        return list(payload)
    raise ValueError(f"no versions for {spec!r} in registry response: {payload!r}")
