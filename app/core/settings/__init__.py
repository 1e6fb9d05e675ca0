"""Domain-specific configuration models."""

from app.core.settings.app_config import AppConfig, AppEnv
from app.core.settings.redis_config import RedisConfig
from app.core.settings.server_config import ServerConfig
from app.core.settings.storage_config import StorageConfig

__all__ = [
    "AppConfig",
    "AppEnv",
    "RedisConfig",
    "ServerConfig",
    "StorageConfig",
]
