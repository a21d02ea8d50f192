"""
Redis Infrastructure Module

Connection lookup and exceptions shared by the cache and entity repositories.

This module provides:
- RedisConnectionRegistry: Named clients, optionally built from settings
- RedisConnectionAccessor: Lazily resolved, cached connection handle
- Exceptions for configuration and naming errors
"""

from .connection_factory import (
    RedisConnectionAccessor,
    RedisConnectionRegistry,
    connection_registry,
    resolve_connection,
)
from .exceptions import (
    RedisException,
    RedisConfigurationException,
    RedisNamingException,
    StoreError,
)

__all__ = [
    # Connection management
    "RedisConnectionAccessor",
    "RedisConnectionRegistry",
    "connection_registry",
    "resolve_connection",
    # Exceptions
    "RedisException",
    "RedisConfigurationException",
    "RedisNamingException",
    "StoreError",
]
