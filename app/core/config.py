"""Application configuration using Pydantic Settings V2."""

from functools import cached_property

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.settings import (
    AppConfig,
    AppEnv,
    RedisConfig,
    ServerConfig,
    StorageConfig,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.storage.history_key).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(
        default="chat-history",
        description="Application name",
    )
    app_env: AppEnv = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=True,
        description="Debug mode",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=8004,
        ge=1,
        le=65535,
        description="Server port",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )

    # Storage keys
    storage_key_prefix: str = Field(
        default="",
        description="Prefix prepended to every storage key",
    )
    history_key: str = Field(
        default="history",
        min_length=1,
        description="Storage key holding the chat history",
    )
    saved_key: str = Field(
        default="savedChats",
        min_length=1,
        description="Storage key holding the saved chats",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
        )

    @cached_property
    def redis(self) -> RedisConfig:
        """Redis connection configuration."""
        return RedisConfig(url=self.redis_url)

    @cached_property
    def storage(self) -> StorageConfig:
        """Chat record storage keys."""
        return StorageConfig(
            key_prefix=self.storage_key_prefix,
            history_key=self.history_key,
            saved_key=self.saved_key,
        )

    # --- Convenience properties (delegate to domain configs) ---

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development


# Global settings instance
settings = Settings()
