"""Content cache for installed tool trees."""

from .backend import CacheBackend, LocalArchiveCache
from .gateway import CacheGateway, CacheOutcome, CacheStatus, cache_key

__all__ = [
    "CacheBackend",
    "LocalArchiveCache",
    "CacheGateway",
    "CacheOutcome",
    "CacheStatus",
    "cache_key",
]
