"""
Redis Hash Repository Implementation

Named Redis hash with a lazily populated local snapshot.

The snapshot (all fields) and the field count are fetched on first use and
then trusted until this instance mutates the hash or a refresh is forced.
Writes by other clients or other instances are never seen until then.
Single-field reads always go to Redis and never touch the snapshot.

Not thread-safe: callers sharing one instance across threads must lock.
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ...core.telemetry import get_tracer, traced_operation
from ...domain.cache.repository_interfaces import (
    IterableEntityRepository,
    KeyValueClient,
)
from ..redis.connection_factory import (
    RedisConnectionAccessor,
    RedisConnectionRegistry,
)
from ..redis.exceptions import RedisNamingException

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class RedisIterableEntity(RedisConnectionAccessor, IterableEntityRepository):
    """
    Base for Redis structures stored under a single name.

    Owns the two local projections. Both start as None (never fetched),
    hold a value once fetched, and go back to None when invalidated.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        connection: Union[KeyValueClient, str, None] = None,
        registry: Optional[RedisConnectionRegistry] = None,
    ):
        super().__init__(connection=connection, registry=registry)
        self.name = name
        self._snapshot: Optional[Dict[Any, Any]] = None
        self._count: Optional[int] = None

    def _require_name(self) -> str:
        if not self.name:
            raise RedisNamingException(type(self).__name__)
        return self.name

    @property
    def has_snapshot(self) -> bool:
        """Whether a snapshot is currently cached."""
        return self._snapshot is not None

    @property
    def has_count(self) -> bool:
        """Whether a field count is currently cached."""
        return self._count is not None

    def invalidate(self) -> None:
        """Drop the cached snapshot and count."""
        self._snapshot = None
        self._count = None

    def iterate(self) -> Iterator[Tuple[Any, Any]]:
        """
        Iterate over (key, value) pairs of the snapshot, in insertion order.

        The snapshot is resolved when this is called, under the usual caching
        rule, so two calls without a mutation in between see the same data.
        """
        return iter(list(self.get_all().items()))

    def clear(self) -> bool:
        """Delete the whole structure from Redis and drop local projections."""
        name = self._require_name()
        client = self.get_connection()
        with traced_operation(tracer, "redis.entity.clear", {"redis.name": name}):
            removed = client.delete(name)

        self.invalidate()
        logger.debug(f"Cleared {name}", extra={"name": name})
        return bool(removed)

    def __iter__(self) -> Iterator[Tuple[Any, Any]]:
        return self.iterate()


class RedisHash(RedisIterableEntity):
    """
    Persistent Redis hash.

    Every write goes to Redis immediately::

        hash = RedisHash("user:42", connection=client)
        hash.set_field("name", "Ada")
        hash.get_field("name")
    """

    def get_field(self, key: str) -> Any:
        """Read one field straight from Redis (None when missing)."""
        name = self._require_name()
        client = self.get_connection()
        with traced_operation(
            tracer, "redis.hash.get_field", {"redis.hash": name, "redis.field": key}
        ):
            return client.hget(name, key)

    def has_field(self, key: str) -> bool:
        """Check field existence straight in Redis."""
        name = self._require_name()
        client = self.get_connection()
        with traced_operation(
            tracer, "redis.hash.has_field", {"redis.hash": name, "redis.field": key}
        ):
            return bool(client.hexists(name, key))

    def set_field(self, key: str, value: Any) -> bool:
        """
        Write one field.

        A client-reported failure returns False and keeps the cached
        projections. HSET answers 0 when it overwrites an existing field;
        that still counts as a successful write.
        """
        name = self._require_name()
        client = self.get_connection()
        with traced_operation(
            tracer, "redis.hash.set_field", {"redis.hash": name, "redis.field": key}
        ):
            result = client.hset(name, key, value)

        if result is False:
            return False

        self.invalidate()
        logger.debug(f"Set {name}[{key}]", extra={"hash": name, "field": key})
        return True

    def remove_field(self, key: str) -> bool:
        """Delete one field. Returns False, keeping the cache, if nothing was removed."""
        name = self._require_name()
        client = self.get_connection()
        with traced_operation(
            tracer, "redis.hash.remove_field", {"redis.hash": name, "redis.field": key}
        ):
            removed = client.hdel(name, key)

        if not removed:
            return False

        self.invalidate()
        logger.debug(f"Removed {name}[{key}]", extra={"hash": name, "field": key})
        return True

    def get_all(self, force_refresh: bool = False) -> Dict[Any, Any]:
        """
        Return all fields, from the snapshot unless absent or forced.

        The result is a copy; changing it does not touch the snapshot.
        """
        name = self._require_name()
        if self._snapshot is not None and not force_refresh:
            return dict(self._snapshot)

        client = self.get_connection()
        with traced_operation(
            tracer,
            "redis.hash.get_all",
            {"redis.hash": name, "redis.force_refresh": force_refresh},
        ):
            self._snapshot = client.hgetall(name)

        logger.debug(
            f"Fetched snapshot of {name} ({len(self._snapshot)} fields)",
            extra={"hash": name},
        )
        return dict(self._snapshot)

    def get_count(self) -> int:
        """Return the number of fields, cached after the first HLEN."""
        name = self._require_name()
        if self._count is None:
            client = self.get_connection()
            with traced_operation(tracer, "redis.hash.get_count", {"redis.hash": name}):
                self._count = client.hlen(name)
        return self._count

    def set_multiple(self, fields: Mapping[str, Any]) -> bool:
        """Write several fields in one call. An empty mapping is a no-op."""
        name = self._require_name()
        if not fields:
            return True

        client = self.get_connection()
        with traced_operation(
            tracer,
            "redis.hash.set_multiple",
            {"redis.hash": name, "redis.field_count": len(fields)},
        ):
            result = client.hset(name, mapping=dict(fields))

        if result is False:
            return False

        self.invalidate()
        logger.debug(
            f"Set {len(fields)} fields on {name}",
            extra={"hash": name, "fields": list(fields)},
        )
        return True

    def get_multiple(self, keys: Sequence[str]) -> List[Any]:
        """Read several fields in one call, aligned to ``keys`` (None when missing)."""
        name = self._require_name()
        key_list = list(keys)
        if not key_list:
            return []

        client = self.get_connection()
        with traced_operation(
            tracer,
            "redis.hash.get_multiple",
            {"redis.hash": name, "redis.field_count": len(key_list)},
        ):
            return client.hmget(name, key_list)

    def increment(self, key: str, by_amount: int = 1) -> int:
        """
        Atomically add ``by_amount`` to an integer field.

        The cached snapshot and count are left alone, so ``get_all()`` keeps
        returning the old value until a forced refresh or another mutation.
        """
        name = self._require_name()
        client = self.get_connection()
        with traced_operation(
            tracer, "redis.hash.increment", {"redis.hash": name, "redis.field": key}
        ):
            return client.hincrby(name, key, by_amount)
