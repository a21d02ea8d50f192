"""
Redis Entities Configuration

Configuration management with environment variable support.
Only connection concerns live here; keys and TTLs are always chosen by callers.
"""

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Library settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Redis configuration
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Redis connection URL for the default connection (unset = none)",
    )
    REDIS_CONNECTION_NAME: str = Field(
        default="redis",
        min_length=1,
        description="Registry name resolved when no connection is supplied",
    )
    REDIS_CONNECTION_TIMEOUT: float = Field(
        default=5.0, gt=0, le=300, description="Socket connect timeout in seconds"
    )
    REDIS_OPERATION_TIMEOUT: float = Field(
        default=5.0, gt=0, le=300, description="Socket read/write timeout in seconds"
    )
    REDIS_MAX_CONNECTIONS: int = Field(
        default=10, ge=1, le=50, description="Redis connection pool size"
    )
    REDIS_DECODE_RESPONSES: bool = Field(
        default=True, description="Decode replies to str instead of bytes"
    )

    @field_validator("REDIS_URL")
    @classmethod
    def validate_redis_url(cls, v):
        """Validate Redis URL scheme."""
        if v is None or v == "":
            return None
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("REDIS_URL must use redis://, rediss:// or unix://")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
