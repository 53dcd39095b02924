"""Setup orchestration: resolve, reuse, restore from cache or install.

The main phase walks an ordered list of guarded steps and stops at the first
one that yields a result:

    existing installation -> cache restore (verified) -> fresh install

The post phase saves a fresh installation to the cache. Cache activity is
best-effort throughout; only install and post-install verification are
fatal.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

from cache import CacheGateway, CacheOutcome, CacheStatus, cache_key
from common.command_runner import CommandRunner
from common.workflow import add_path
from constants import Constants
from errors import SetupVltError, VerificationError
from installer.npm import cache_paths, global_bin_path, install_tool, tool_path
from installer.probe import installed_version, verify_installation
from registry import Registry
from versioning.models import SetupResult
from versioning.resolver import resolve_version

logger = logging.getLogger(__name__)

Step = Callable[[str], Optional[SetupResult]]


class SetupOrchestrator:
    """Runs the main and post phases against injected collaborators."""

    def __init__(
        self,
        *,
        runner: CommandRunner,
        registry: Registry,
        cache: CacheGateway,
        registry_url: Optional[str] = None,
        no_cache: bool = False,
    ) -> None:
        self._runner = runner
        self._registry = registry
        self._cache = cache
        self._registry_url = registry_url
        self._no_cache = no_cache

    def setup(self, requested: str, version_file: Optional[str] = None) -> SetupResult:
        """Make the requested tool version available and on PATH.

        Raises:
            SetupVltError: when installation or post-install verification fails.
        """
        resolved = resolve_version(requested, version_file, registry=self._registry)
        logger.info("Setting up %s version: %s", Constants.TOOL_NAME, resolved)

        steps: List[Step] = [self._use_existing, self._restore_from_cache]
        for step in steps:
            result = step(resolved)
            if result is not None:
                break
        else:
            result = self._install_fresh(resolved)

        add_path(os.path.dirname(result.installed_path))
        return result

    def _result(self, resolved: str, version: str, cache_hit: bool) -> SetupResult:
        bin_dir = global_bin_path(self._runner)
        return SetupResult(
            resolved_version=resolved,
            installed_version=version,
            installed_path=tool_path(bin_dir),
            cache_hit=cache_hit,
        )

    def _use_existing(self, resolved: str) -> Optional[SetupResult]:
        existing = installed_version(self._runner)
        if existing is None or existing != resolved:
            if existing is not None:
                logger.info(
                    "Found %s %s, but %s was requested", Constants.TOOL_NAME, existing, resolved
                )
            return None
        logger.info("%s %s is already installed", Constants.TOOL_NAME, existing)
        return self._result(resolved, existing, cache_hit=False)

    def _restore_from_cache(self, resolved: str) -> Optional[SetupResult]:
        key = cache_key(resolved)
        if self._no_cache:
            logger.info("Caching disabled; skipping cache restore")
            return None
        if not key:
            logger.info("Not restoring from cache for version %s", resolved)
            return None

        logger.info("Attempting to restore %s from cache with key: %s", Constants.TOOL_NAME, key)
        try:
            paths = cache_paths(self._runner)
        except SetupVltError as exc:
            logger.warning("Cannot determine cache paths; skipping restore: %s", exc)
            return None
        outcome = self._cache.restore(paths, key)
        if not outcome.hit:
            logger.info("No cached %s found for key: %s", Constants.TOOL_NAME, key)
            return None

        logger.info("Restored %s from cache", Constants.TOOL_NAME)
        try:
            version = verify_installation(self._runner)
        except VerificationError as exc:
            logger.warning("Cached %s installation is broken: %s", Constants.TOOL_NAME, exc)
            return None
        return self._result(resolved, version, cache_hit=True)

    def _install_fresh(self, resolved: str) -> SetupResult:
        install_tool(resolved, self._registry_url, self._runner)
        version = verify_installation(self._runner)
        return self._result(resolved, version, cache_hit=False)

    def save_cache_if_needed(
        self, version: Optional[str], cache_hit: bool, no_cache: bool
    ) -> CacheOutcome:
        """Post phase: store a fresh installation under its cache key.

        Never raises; every failure is logged as a warning.
        """
        key = cache_key(version or "")
        if no_cache or cache_hit:
            logger.info("Skipping cache save (disabled or already cached)")
            return CacheOutcome(CacheStatus.SKIPPED, key, "disabled or already cached")
        if not key:
            logger.info("Skipping cache save (latest version or invalid cache key)")
            return CacheOutcome(CacheStatus.SKIPPED, key, "no cache key")

        try:
            paths = cache_paths(self._runner)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to save %s installation to cache: %s", Constants.TOOL_NAME, exc)
            return CacheOutcome(CacheStatus.ERROR, key, str(exc))

        logger.info("Saving %s installation to cache with key: %s", Constants.TOOL_NAME, key)
        outcome = self._cache.save(paths, key)
        if outcome.status is CacheStatus.SAVED:
            logger.info("Saved %s installation to cache", Constants.TOOL_NAME)
        return outcome
