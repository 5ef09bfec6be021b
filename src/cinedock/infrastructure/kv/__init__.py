"""Mutable store infrastructure - backend implementations."""

from .redis_store import RedisStore
from .store_factory import create_store
from .upstash import UpstashRestStore, pairs_to_dict

__all__ = [
    "RedisStore",
    "UpstashRestStore",
    "create_store",
    "pairs_to_dict",
]
