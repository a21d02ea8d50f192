"""
redis-entities

Expiring key-value cache and persistent hash entity on top of Redis.
"""

from .domain.cache.serializers import JsonSerializer, PassThroughSerializer
from .domain.cache.value_objects import TTL
from .infrastructure.redis import (
    RedisConfigurationException,
    RedisConnectionRegistry,
    RedisException,
    RedisNamingException,
    StoreError,
    connection_registry,
    resolve_connection,
)
from .infrastructure.repositories import RedisExpiringCache, RedisHash

__version__ = "0.1.0"

__all__ = [
    "RedisExpiringCache",
    "RedisHash",
    "TTL",
    "JsonSerializer",
    "PassThroughSerializer",
    "RedisConnectionRegistry",
    "connection_registry",
    "resolve_connection",
    "RedisException",
    "RedisConfigurationException",
    "RedisNamingException",
    "StoreError",
]
