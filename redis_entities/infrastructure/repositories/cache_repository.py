"""
Redis Cache Repository Implementation

Expiring key-value cache backed by Redis.

TTL handling is NOT atomic. ``set`` and ``add`` write the value first and
issue a separate expire call afterwards; if the process dies or the expire
call fails in between, the value stays in Redis with no TTL at all.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

from ...core.telemetry import add_span_attribute, get_tracer, traced_operation
from ...domain.cache.repository_interfaces import CacheRepository, KeyValueClient
from ...domain.cache.serializers import PassThroughSerializer
from ...domain.cache.value_objects import TTL
from ..redis.connection_factory import (
    RedisConnectionAccessor,
    RedisConnectionRegistry,
)

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class RedisExpiringCache(RedisConnectionAccessor, CacheRepository):
    """
    Generic get/set/add/delete/flush cache over a Redis database.

    Keys are used exactly as given. No prefix or namespace is applied, so
    ``flush`` empties the whole database the connection points at.
    """

    def __init__(
        self,
        connection: Union[KeyValueClient, str, None] = None,
        serializer: Optional[Any] = None,
        registry: Optional[RedisConnectionRegistry] = None,
    ):
        super().__init__(connection=connection, registry=registry)
        self.serializer = serializer or PassThroughSerializer()

    def _decode(self, raw: Any) -> Any:
        if raw is None:
            return None
        return self.serializer.loads(raw)

    def get(self, key: str) -> Any:
        """Get cached value, or None when the key is missing or expired."""
        client = self.get_connection()
        with traced_operation(tracer, "redis.cache.get", {"redis.key": key}):
            raw = client.get(key)
            add_span_attribute("cache.hit", raw is not None)

        logger.debug(
            f"Cache {'hit' if raw is not None else 'miss'}: {key}",
            extra={"key": key},
        )
        return self._decode(raw)

    def multi_get(self, keys: Iterable[str]) -> Dict[str, Any]:
        """
        Get several values in one MGET.

        Every requested key is present in the result. Missing keys map to
        None, so check values rather than membership.
        """
        key_list = list(keys)
        if not key_list:
            return {}

        client = self.get_connection()
        with traced_operation(
            tracer, "redis.cache.multi_get", {"redis.key_count": len(key_list)}
        ):
            values = client.mget(key_list)

        result = {key: self._decode(raw) for key, raw in zip(key_list, values)}
        logger.debug(
            f"Cache multi-get: {sum(v is not None for v in result.values())}"
            f"/{len(key_list)} hits",
            extra={"keys": key_list},
        )
        return result

    def set(self, key: str, value: Any, ttl: Union[int, TTL] = 0) -> bool:
        """
        Store value unconditionally.

        With a positive ttl a second EXPIRE call follows the write, and its
        result is what gets returned; whether the write itself succeeded is
        not reported separately in that case. A ttl of 0 means never expire
        and skips the second call.
        """
        ttl = TTL.of(ttl)
        client = self.get_connection()

        with traced_operation(
            tracer, "redis.cache.set", {"redis.key": key, "redis.ttl": ttl.seconds}
        ):
            stored = client.set(key, self.serializer.dumps(value))
            if not ttl.expires:
                logger.debug(f"Cached {key} without expiry", extra={"key": key})
                return bool(stored)

            expired = self._expire(client, key, ttl)

        logger.debug(f"Cached {key} for {ttl}", extra={"key": key, "ttl": ttl.seconds})
        return bool(expired)

    def add(self, key: str, value: Any, ttl: Union[int, TTL] = 0) -> bool:
        """
        Store value only if the key does not exist yet.

        SETNX is atomic; the following EXPIREAT is not part of it. Returns
        False without touching the store further when the key exists.
        """
        ttl = TTL.of(ttl)
        client = self.get_connection()

        with traced_operation(
            tracer, "redis.cache.add", {"redis.key": key, "redis.ttl": ttl.seconds}
        ):
            expires_at = ttl.expires_at() if ttl.expires else None

            if not client.setnx(key, self.serializer.dumps(value)):
                logger.debug(f"Cache add skipped, key exists: {key}", extra={"key": key})
                return False

            if expires_at is not None:
                self._expire_at(client, key, expires_at)

        logger.debug(f"Added {key} for {ttl}", extra={"key": key, "ttl": ttl.seconds})
        return True

    def _expire(self, client: KeyValueClient, key: str, ttl: TTL) -> bool:
        try:
            return client.expire(key, ttl.seconds)
        except Exception:
            logger.warning(
                f"Expire failed after write, {key} is stored without TTL",
                extra={"key": key, "ttl": ttl.seconds},
            )
            raise

    def _expire_at(self, client: KeyValueClient, key: str, when: int) -> bool:
        try:
            return client.expireat(key, when)
        except Exception:
            logger.warning(
                f"Expire failed after add, {key} is stored without TTL",
                extra={"key": key, "expires_at": when},
            )
            raise

    def exists(self, key: str) -> bool:
        """Check whether key is present without reading its value."""
        client = self.get_connection()
        with traced_operation(tracer, "redis.cache.exists", {"redis.key": key}):
            return client.exists(key) > 0

    def delete(self, key: str) -> bool:
        """Delete key. Returns True once the call completes, even if the key was missing."""
        client = self.get_connection()
        with traced_operation(tracer, "redis.cache.delete", {"redis.key": key}):
            removed = client.delete(key)

        logger.debug(f"Deleted {key} ({removed} removed)", extra={"key": key})
        return True

    def flush(self) -> bool:
        """
        Delete every key in the connected database.

        Be careful when the database is shared with other applications:
        their keys go too.
        """
        client = self.get_connection()
        with traced_operation(tracer, "redis.cache.flush"):
            flushed = bool(client.flushdb())

        logger.warning("Flushed entire Redis database", extra={"flushed": flushed})
        return flushed
