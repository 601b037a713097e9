"""
Centralized Configuration System for Sortly

Type-safe configuration using Pydantic Settings. Every value can be
overridden through environment variables or a local `.env` file.
"""

import os
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class StoreBackend(str, Enum):
    """Key-value store backends for history persistence"""
    MEMORY = "memory"
    REDIS = "redis"


class RedisSettings(BaseSettings):
    """Redis configuration settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    redis_host: str = Field(
        default="localhost",
        description="Redis host"
    )
    redis_port: int = Field(
        default=6379,
        description="Redis port"
    )
    redis_password: Optional[str] = Field(
        default=None,
        description="Redis password"
    )
    redis_db: int = Field(
        default=0,
        description="Redis database index"
    )

    @property
    def redis_url(self) -> str:
        """Construct Redis URL"""
        # If Redis password is empty, don't include auth
        if not self.redis_password:
            return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"


class ServiceSettings(BaseSettings):
    """Service configuration settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    sortly_host: str = Field(
        default="0.0.0.0",
        description="Sortly service bind host"
    )
    sortly_port: int = Field(
        default=8010,
        description="Sortly service port"
    )
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma separated CORS origins"
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for service loggers"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class SortlySettings(BaseSettings):
    """Parsing, history and share-link settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    history_key: str = Field(
        default="sortly:history",
        description="Key under which history entries are stored"
    )
    history_max_entries: int = Field(
        default=30,
        ge=1,
        description="Number of most-recent history entries kept"
    )
    max_paste_bytes: int = Field(
        default=5_000_000,
        ge=1,
        description="Largest paste (UTF-8 bytes) accepted by the HTTP layer"
    )
    max_share_bytes: int = Field(
        default=10_000_000,
        ge=1,
        description="Largest decompressed share payload (bytes) a link may expand to"
    )
    public_base_url: str = Field(
        default="http://localhost:3000",
        description="Origin used when building share links"
    )
    store_backend: StoreBackend = Field(
        default=StoreBackend.MEMORY,
        description="History store backend (memory or redis)"
    )

    @field_validator("public_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        return (v or "http://localhost:3000").rstrip("/")


class ApplicationSettings(BaseSettings):
    """Main application settings - aggregates all other settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )

    # Nested settings
    redis: RedisSettings = RedisSettings()
    services: ServiceSettings = ServiceSettings()
    sortly: SortlySettings = SortlySettings()

    @property
    def is_test(self) -> bool:
        """Check if running in test mode"""
        return self.environment == Environment.TEST


settings = ApplicationSettings()


def get_settings() -> ApplicationSettings:
    """
    Get the global settings instance

    Usable with FastAPI's Depends() for dependency injection.
    """
    return settings


def reload_settings() -> ApplicationSettings:
    """
    Reload settings from environment (useful for testing)
    """
    global settings
    settings = ApplicationSettings(
        redis=RedisSettings(),
        services=ServiceSettings(),
        sortly=SortlySettings(),
    )
    return settings
