"""
Cache value serializers.

The cache stores opaque values. A serializer turns caller values into what
the store keeps and back again.
"""

import json
from typing import Any


class PassThroughSerializer:
    """Stores values exactly as given (the store client does any encoding)."""

    def dumps(self, value: Any) -> Any:
        return value

    def loads(self, raw: Any) -> Any:
        return raw


class JsonSerializer:
    """JSON encoding for structured values."""

    def __init__(self, sort_keys: bool = False):
        self.sort_keys = sort_keys

    def dumps(self, value: Any) -> str:
        return json.dumps(value, default=str, sort_keys=self.sort_keys)

    def loads(self, raw: Any) -> Any:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)
