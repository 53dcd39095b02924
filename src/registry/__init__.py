"""Registry backends used to resolve version ranges and tags."""

from typing import Optional

from common.command_runner import CommandRunner
from constants import ResolverBackends

from .base import Registry, VersionsAnswer
from .npm_cli import NpmViewRegistry
from .npm_http import HttpRegistry


def create_registry(
    backend: str,
    *,
    registry_url: Optional[str] = None,
    runner: Optional[CommandRunner] = None,
) -> Registry:
    """Build the registry backend named by ``backend`` ("npm" or "http")."""
    if backend == ResolverBackends.HTTP.value:
        return HttpRegistry(registry_url=registry_url)
    if backend == ResolverBackends.NPM.value:
        return NpmViewRegistry(runner=runner, registry_url=registry_url)
    raise ValueError(f"Unsupported resolver backend: {backend}")


__all__ = [
    "Registry",
    "VersionsAnswer",
    "NpmViewRegistry",
    "HttpRegistry",
    "create_registry",
]
