"""
Redis Connection Factory

Named connection registry and the per-instance connection accessor.
Clients are injected directly or looked up by name; this module never
pings, retries or closes them.
"""

import logging
from typing import Any, Dict, Optional, Union

import redis

from ...core.config import Settings, get_settings
from ...domain.cache.repository_interfaces import KeyValueClient
from .exceptions import RedisConfigurationException

logger = logging.getLogger(__name__)


class RedisConnectionRegistry:
    """
    Registry of named key-value clients.

    Plays the part of the host application's component container: a cache
    configured with a connection name gets whatever client is registered
    under that name. The default name can be built from ``REDIS_URL``.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self._clients: Dict[str, KeyValueClient] = {}

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def register(self, name: str, client: KeyValueClient) -> KeyValueClient:
        """Register an existing client under ``name``, replacing any previous one."""
        if not name:
            raise RedisConfigurationException(
                message="Connection name cannot be empty", config_key="name"
            )
        if client is None:
            raise RedisConfigurationException(
                message=f"Cannot register an empty connection as '{name}'",
                config_key=name,
            )
        self._clients[name] = client
        logger.info(
            f"Registered Redis connection '{name}'",
            extra={"connection_name": name, "client_type": type(client).__name__},
        )
        return client

    def register_url(self, name: str, url: str, **kwargs: Any) -> KeyValueClient:
        """Build a redis-py client for ``url`` and register it under ``name``."""
        connection_kwargs = {
            "decode_responses": self.settings.REDIS_DECODE_RESPONSES,
            "socket_connect_timeout": self.settings.REDIS_CONNECTION_TIMEOUT,
            "socket_timeout": self.settings.REDIS_OPERATION_TIMEOUT,
            "max_connections": self.settings.REDIS_MAX_CONNECTIONS,
        }
        connection_kwargs.update(kwargs)

        try:
            client = redis.Redis.from_url(url, **connection_kwargs)
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to create Redis client for '{name}': {e}")
            raise RedisConfigurationException(
                message=f"Invalid Redis connection settings for '{name}': {str(e)}",
                config_key=name,
                original_error=e,
            )

        return self.register(name, client)

    def resolve(self, name: str) -> KeyValueClient:
        """
        Return the client registered under ``name``.

        Raises:
            RedisConfigurationException: If nothing is registered and the name
                cannot be built from settings
        """
        client = self._clients.get(name)
        if client is not None:
            return client

        if name == self.settings.REDIS_CONNECTION_NAME and self.settings.REDIS_URL:
            logger.debug(
                f"Building default Redis connection '{name}' from REDIS_URL",
                extra={"connection_name": name},
            )
            return self.register_url(name, self.settings.REDIS_URL)

        raise RedisConfigurationException(
            message=f"No Redis connection registered as '{name}'",
            config_key=name,
        )

    def unregister(self, name: str) -> Optional[KeyValueClient]:
        """Forget the client registered under ``name``. It is not closed."""
        return self._clients.pop(name, None)

    def clear(self) -> None:
        """Forget every registered client."""
        self._clients.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._clients


# Global connection registry
connection_registry = RedisConnectionRegistry()


def resolve_connection(
    name: Optional[str] = None, registry: Optional[RedisConnectionRegistry] = None
) -> KeyValueClient:
    """
    Resolve a client by name.

    Args:
        name: Registered connection name (defaults to REDIS_CONNECTION_NAME)
        registry: Registry to look in (defaults to the global registry)
    """
    registry = registry or connection_registry
    return registry.resolve(name or registry.settings.REDIS_CONNECTION_NAME)


class RedisConnectionAccessor:
    """
    Lazily resolved, cached connection handle.

    Base for everything that talks to the store. A handle passed in is used
    as-is; a name is resolved on the first ``get_connection()`` call and the
    result kept for the lifetime of the instance.
    """

    def __init__(
        self,
        connection: Union[KeyValueClient, str, None] = None,
        registry: Optional[RedisConnectionRegistry] = None,
    ):
        self._connection: Optional[KeyValueClient] = None
        self._connection_name: Optional[str] = None
        self._registry = registry
        if connection is not None:
            self.set_connection(connection)

    def set_connection(self, connection: Union[KeyValueClient, str]) -> None:
        """Use ``connection``: a client handle, or the name of a registered one."""
        if isinstance(connection, str):
            self._connection_name = connection
            self._connection = None
        else:
            self._connection_name = None
            self._connection = connection

    def get_connection(self) -> KeyValueClient:
        """
        Return the client handle, resolving it on first use.

        Raises:
            RedisConfigurationException: If no handle was supplied and none
                can be resolved
        """
        if self._connection is None:
            self._connection = resolve_connection(
                self._connection_name, self._registry
            )
        return self._connection
