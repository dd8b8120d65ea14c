"""Configuration for BurnRead."""

from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_TYPES = ("memory", "redis")


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BURNREAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    # Message lifecycle (milliseconds)
    default_ttl: int = 86_400_000  # 24 hours
    max_ttl: int = 604_800_000  # 7 days
    cleanup_interval: int = 60_000  # 1 minute

    # Storage
    storage_type: str = "memory"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0
    redis_key_prefix: str = "burnread:"
    redis_command_timeout: float = 10.0  # seconds

    # Rate limiting
    rate_limit_max_requests: int = 100
    rate_limit_window: float = 3600.0  # seconds
    rate_limit_create: bool = False  # Also gate POST /api/messages

    # Encryption (base64, 32 bytes). Generated per process when unset.
    encryption_key: Optional[str] = None

    # CORS
    cors_allowed_origins: list[str] = ["*"]
    cors_allowed_methods: list[str] = ["GET", "POST", "OPTIONS"]
    cors_allowed_headers: list[str] = ["Content-Type"]
    cors_max_age: int = 3600

    @field_validator("storage_type")
    @classmethod
    def validate_storage_type(cls, v: str) -> str:
        """Validate the storage backend selector."""
        v = v.lower()
        if v not in STORAGE_TYPES:
            raise ValueError(f"Unsupported storage type: {v}")
        return v

    @field_validator("cleanup_interval", "rate_limit_max_requests")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @model_validator(mode="after")
    def validate_ttl_bounds(self) -> "Settings":
        """Ensure 0 < default_ttl <= max_ttl."""
        if self.default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        if self.default_ttl > self.max_ttl:
            raise ValueError(
                f"default_ttl ({self.default_ttl}) exceeds max_ttl ({self.max_ttl})"
            )
        return self

    @property
    def redis_url(self) -> str:
        """Redis connection URL built from the individual parameters."""
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"


def get_settings() -> Settings:
    """Load settings from the environment and optional .env file."""
    return Settings()
