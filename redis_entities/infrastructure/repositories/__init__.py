"""
Redis-backed repositories: the expiring cache and the hash entity.
"""

from .cache_repository import RedisExpiringCache
from .hash_repository import RedisHash, RedisIterableEntity

__all__ = ["RedisExpiringCache", "RedisHash", "RedisIterableEntity"]
