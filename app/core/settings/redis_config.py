"""Redis connection configuration."""

from pydantic import BaseModel


class RedisConfig(BaseModel, frozen=True):
    """Redis connection settings."""

    url: str

    @property
    def is_local(self) -> bool:
        """Check if the Redis server runs on this machine."""
        return "localhost" in self.url or "127.0.0.1" in self.url
