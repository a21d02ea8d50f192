"""
Cache Value Objects

Immutable value objects for cache expiry.
"""

import math
import time
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    Relative seconds from "now". Zero means the entry never expires;
    callers passing a negative number get the same no-expiry behavior
    through ``TTL.of``.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, int):
            raise TypeError("TTL seconds must be an integer")
        if self.seconds < 0:
            raise ValueError("TTL cannot be negative")

    @classmethod
    def of(cls, value: Union[int, float, "TTL", None]) -> "TTL":
        """
        Normalize a caller-supplied TTL.

        None and values <= 0 mean no expiry. Positive fractions round up to
        whole seconds so they never collapse into "never expire".
        """
        if isinstance(value, TTL):
            return value
        if value is None or value <= 0:
            return cls.never()
        return cls(math.ceil(value))

    @classmethod
    def never(cls) -> "TTL":
        """TTL that never expires."""
        return cls(0)

    @classmethod
    def minutes(cls, minutes: int) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def hours(cls, hours: int) -> "TTL":
        """Create TTL from hours."""
        return cls(hours * 3600)

    @classmethod
    def days(cls, days: int) -> "TTL":
        """Create TTL from days."""
        return cls(days * 86400)

    @property
    def expires(self) -> bool:
        """Whether this TTL requires an expire call at all."""
        return self.seconds > 0

    def expires_at(self, now: Optional[float] = None) -> int:
        """Absolute unix timestamp at which an entry written at ``now`` expires."""
        if not self.expires:
            raise ValueError("TTL without expiry has no expiry instant")
        current = time.time() if now is None else now
        return int(current) + self.seconds

    def __str__(self) -> str:
        return f"{self.seconds}s" if self.expires else "never"
