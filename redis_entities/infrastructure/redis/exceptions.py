"""
Redis Infrastructure Exceptions

Domain-specific exceptions for cache and entity operations.
Remote-call failures are NOT wrapped: redis-py errors reach the caller as-is.
"""

from typing import Optional, Any, Dict

from redis.exceptions import RedisError

# Any remote-call failure, passed through untranslated.
StoreError = RedisError


class RedisException(Exception):
    """Base exception for errors raised by this library itself.

    Store failures are not converted into this type; they stay RedisError.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class RedisConfigurationException(RedisException):
    """Raised when no usable connection can be supplied or resolved."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = str(config_value)
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=message, error_code="REDIS_CONFIGURATION_ERROR", details=details
        )
        # Preserve exception context for debugging (exception chaining)
        if original_error:
            self.__cause__ = original_error


class RedisNamingException(RedisException):
    """Raised when a named entity is used before it has been given a name."""

    def __init__(self, entity: str):
        """Initialize exception.

        Args:
            entity: Class name of the entity that has no name
        """
        super().__init__(
            message=f"{entity} requires a name",
            error_code="REDIS_ENTITY_NAME_REQUIRED",
            details={"entity": entity},
        )
