"""
Cache Repository Interfaces

Abstract contracts for the expiring cache and the named iterable entity,
plus the narrow key-value client surface both depend on.
"""

from abc import ABC, abstractmethod
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
)

from .value_objects import TTL


class KeyValueClient(Protocol):
    """
    Remote key-value client surface.

    Method names follow redis-py, so a ``redis.Redis`` instance satisfies it.
    Nothing else on the client is used.
    """

    def get(self, name: str) -> Any: ...

    def mget(self, keys: Sequence[str], *args: str) -> List[Any]: ...

    def set(self, name: str, value: Any) -> Any: ...

    def setnx(self, name: str, value: Any) -> bool: ...

    def expire(self, name: str, time: int) -> bool: ...

    def expireat(self, name: str, when: int) -> bool: ...

    def exists(self, *names: str) -> int: ...

    def delete(self, *names: str) -> int: ...

    def flushdb(self) -> bool: ...

    def hset(
        self,
        name: str,
        key: Optional[str] = None,
        value: Any = None,
        mapping: Optional[Mapping[str, Any]] = None,
    ) -> int: ...

    def hdel(self, name: str, *keys: str) -> int: ...

    def hlen(self, name: str) -> int: ...

    def hgetall(self, name: str) -> Dict[Any, Any]: ...

    def hexists(self, name: str, key: str) -> bool: ...

    def hget(self, name: str, key: str) -> Any: ...

    def hincrby(self, name: str, key: str, amount: int = 1) -> int: ...

    def hmget(self, name: str, keys: Sequence[str], *args: str) -> List[Any]: ...


class CacheRepository(ABC):
    """
    Abstract expiring key-value cache.

    Values live only in the remote store. A missing or expired key reads
    as None, never as an error.
    """

    @abstractmethod
    def get(self, key: str) -> Any:
        """Get value by key, None when absent."""
        pass

    @abstractmethod
    def multi_get(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Get several values in one round trip; every key is in the result."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Union[int, TTL] = 0) -> bool:
        """Store value unconditionally, optionally expiring after ttl seconds."""
        pass

    @abstractmethod
    def add(self, key: str, value: Any, ttl: Union[int, TTL] = 0) -> bool:
        """Store value only if key is absent."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete key. A missing key is not an error."""
        pass

    @abstractmethod
    def flush(self) -> bool:
        """Delete every key in the connected database."""
        pass


class IterableEntityRepository(ABC):
    """
    Abstract named remote collection with a lazily cached local view.
    """

    @abstractmethod
    def get_all(self, force_refresh: bool = False) -> Dict[Any, Any]:
        """Return a copy of the cached snapshot, fetching it when absent or forced."""
        pass

    @abstractmethod
    def get_count(self) -> int:
        """Return the cached element count, fetching it when absent."""
        pass

    @abstractmethod
    def iterate(self) -> Iterator[Tuple[Any, Any]]:
        """Iterate over the snapshot."""
        pass

    @abstractmethod
    def invalidate(self) -> None:
        """Drop every locally cached projection."""
        pass
