"""
Main pytest configuration for all tests.

Provides an in-memory, call-counting Redis double with a controllable clock,
so cache and hash behavior can be checked without a running server.
"""

import os
import time
from typing import Any, Dict, List, Optional, Tuple

import pytest

# Set test environment variables before importing library modules
os.environ.pop("REDIS_URL", None)
os.environ.pop("REDIS_CONNECTION_NAME", None)

from redis_entities.infrastructure.redis.connection_factory import (  # noqa: E402
    connection_registry,
)


class FakeClock:
    """Manually advanced clock, starting at the real current time."""

    def __init__(self, start: Optional[float] = None):
        self.now = time.time() if start is None else start

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedisClient:
    """
    In-memory stand-in for redis.Redis(decode_responses=True).

    Values are stored as strings like Redis does. Every command is recorded
    in ``calls`` as (command, args).
    """

    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self._strings: Dict[str, str] = {}
        self._hashes: Dict[str, Dict[str, str]] = {}
        self._expiry: Dict[str, float] = {}

    # Helpers

    def _record(self, command: str, *args: Any) -> None:
        self.calls.append((command, args))

    def _purge(self, key: str) -> None:
        deadline = self._expiry.get(key)
        if deadline is not None and self.clock.now >= deadline:
            self._strings.pop(key, None)
            self._hashes.pop(key, None)
            self._expiry.pop(key, None)

    def _present(self, key: str) -> bool:
        self._purge(key)
        return key in self._strings or key in self._hashes

    def command_names(self) -> List[str]:
        return [command for command, _ in self.calls]

    def ttl(self, key: str) -> int:
        """Seconds left for key, -1 without expiry, -2 when missing."""
        if not self._present(key):
            return -2
        deadline = self._expiry.get(key)
        if deadline is None:
            return -1
        return int(deadline - self.clock.now)

    # String commands

    def get(self, name: str) -> Optional[str]:
        self._record("get", name)
        self._purge(name)
        return self._strings.get(name)

    def mget(self, keys, *args) -> List[Optional[str]]:
        self._record("mget", list(keys), *args)
        result = []
        for key in list(keys) + list(args):
            self._purge(key)
            result.append(self._strings.get(key))
        return result

    def set(self, name: str, value: Any) -> bool:
        self._record("set", name, value)
        self._strings[name] = str(value)
        self._expiry.pop(name, None)
        return True

    def setnx(self, name: str, value: Any) -> bool:
        self._record("setnx", name, value)
        if self._present(name):
            return False
        self._strings[name] = str(value)
        return True

    def expire(self, name: str, time: int) -> bool:
        self._record("expire", name, time)
        if not self._present(name):
            return False
        self._expiry[name] = self.clock.now + time
        return True

    def expireat(self, name: str, when: int) -> bool:
        self._record("expireat", name, when)
        if not self._present(name):
            return False
        self._expiry[name] = float(when)
        return True

    def exists(self, *names: str) -> int:
        self._record("exists", *names)
        return sum(1 for name in names if self._present(name))

    def delete(self, *names: str) -> int:
        self._record("delete", *names)
        removed = 0
        for name in names:
            if self._present(name):
                removed += 1
            self._strings.pop(name, None)
            self._hashes.pop(name, None)
            self._expiry.pop(name, None)
        return removed

    def flushdb(self) -> bool:
        self._record("flushdb")
        self._strings.clear()
        self._hashes.clear()
        self._expiry.clear()
        return True

    # Hash commands

    def hset(self, name, key=None, value=None, mapping=None) -> int:
        self._record("hset", name, key, value, mapping)
        self._purge(name)
        fields = dict(mapping or {})
        if key is not None:
            fields[key] = value
        bucket = self._hashes.setdefault(name, {})
        added = 0
        for field, field_value in fields.items():
            if field not in bucket:
                added += 1
            bucket[field] = str(field_value)
        return added

    def hdel(self, name: str, *keys: str) -> int:
        self._record("hdel", name, *keys)
        self._purge(name)
        bucket = self._hashes.get(name, {})
        removed = sum(1 for key in keys if bucket.pop(key, None) is not None)
        if name in self._hashes and not bucket:
            del self._hashes[name]
        return removed

    def hlen(self, name: str) -> int:
        self._record("hlen", name)
        self._purge(name)
        return len(self._hashes.get(name, {}))

    def hgetall(self, name: str) -> Dict[str, str]:
        self._record("hgetall", name)
        self._purge(name)
        return dict(self._hashes.get(name, {}))

    def hexists(self, name: str, key: str) -> bool:
        self._record("hexists", name, key)
        self._purge(name)
        return key in self._hashes.get(name, {})

    def hget(self, name: str, key: str) -> Optional[str]:
        self._record("hget", name, key)
        self._purge(name)
        return self._hashes.get(name, {}).get(key)

    def hincrby(self, name: str, key: str, amount: int = 1) -> int:
        self._record("hincrby", name, key, amount)
        self._purge(name)
        bucket = self._hashes.setdefault(name, {})
        new_value = int(bucket.get(key, 0)) + amount
        bucket[key] = str(new_value)
        return new_value

    def hmget(self, name: str, keys, *args) -> List[Optional[str]]:
        self._record("hmget", name, list(keys), *args)
        self._purge(name)
        bucket = self._hashes.get(name, {})
        return [bucket.get(key) for key in list(keys) + list(args)]


@pytest.fixture
def clock():
    """Controllable clock shared with the fake client."""
    return FakeClock()


@pytest.fixture
def fake_redis(clock):
    """In-memory call-counting Redis client."""
    return FakeRedisClient(clock)


@pytest.fixture(autouse=True)
def reset_connection_registry():
    """Keep the global registry empty between tests."""
    connection_registry.clear()
    yield
    connection_registry.clear()
