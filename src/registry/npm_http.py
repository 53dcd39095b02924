"""Registry backend that reads the npm packument over HTTP.

Used where the npm CLI is unavailable or when the ``http`` resolver is
configured. Matching follows npm semver rules via ``semantic_version``.
"""

import logging
import re
from typing import List, Optional

import semantic_version

from common.http_client import get_json
from common.logging_utils import safe_url
from constants import Constants
from errors import RegistryError

from .base import VersionsAnswer

logger = logging.getLogger(__name__)


def _normalize_spec(spec_str: str) -> str:
    """Normalize npm range syntax (hyphen, x-ranges) into SimpleSpec-compatible form."""
    s = spec_str.strip()

    # Hyphen ranges: "1.2.3 - 1.4.5" => ">=1.2.3,<=1.4.5"
    m = re.match(r'^\s*([0-9A-Za-z\.\-\+]+)\s+-\s+([0-9A-Za-z\.\-\+]+)\s*$', s)
    if m:
        return f">={m.group(1)},<={m.group(2)}"

    s2 = s.replace('*', 'x').lower()
    m = re.match(r'^\s*(\d+)\.(\d+)\.x\s*$', s2)
    if m:
        major, minor = int(m.group(1)), int(m.group(2))
        return f">={major}.{minor}.0,<{major}.{minor + 1}.0"

    m = re.match(r'^\s*(\d+)(?:\.x)?\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    return spec_str


def _build_spec(spec_str: str):
    """Prefer NpmSpec; fall back to a normalized SimpleSpec."""
    try:
        return semantic_version.NpmSpec(spec_str)
    except ValueError:
        return semantic_version.SimpleSpec(_normalize_spec(spec_str))


class HttpRegistry:
    """Resolve specifiers against ``<registry>/<tool>`` packument JSON."""

    def __init__(self, *, registry_url: Optional[str] = None, tool: Optional[str] = None) -> None:
        base = registry_url or Constants.REGISTRY_URL_NPM
        self._base = base if base.endswith("/") else base + "/"
        self._tool = tool or Constants.TOOL_NAME

    def _packument(self) -> dict:
        url = f"{self._base}{self._tool}"
        headers = {
            "Accept": "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"
        }
        status_code, _, data = get_json(url, headers=headers)
        if status_code != 200 or not isinstance(data, dict):
            raise RegistryError(
                f"registry request for {safe_url(url)} failed (status {status_code})"
            )
        return data

    def view_versions(self, spec: str) -> VersionsAnswer:
        data = self._packument()

        dist_tags = data.get("dist-tags") or {}
        if isinstance(dist_tags, dict) and isinstance(dist_tags.get(spec), str):
            return dist_tags[spec]

        try:
            npm_spec = _build_spec(spec)
        except ValueError as exc:
            raise RegistryError(f"invalid semver range {spec!r}: {exc}") from exc

        matches: List[str] = []
        for candidate in (data.get("versions") or {}):
            try:
                version = semantic_version.Version(candidate)
            except ValueError:
                continue  # Skip invalid versions
            if npm_spec.match(version):
                matches.append(candidate)

        if not matches:
            raise RegistryError(f"no {self._tool} versions match {spec!r}")
        if len(matches) == 1:
            return matches[0]
        return matches

    def latest_version(self) -> str:
        dist_tags = self._packument().get("dist-tags") or {}
        latest = dist_tags.get(Constants.LATEST) if isinstance(dist_tags, dict) else None
        if not isinstance(latest, str) or not latest:
            raise RegistryError(f"registry has no latest dist-tag for {self._tool}")
        return latest
