"""HTTP server configuration."""

from pydantic import BaseModel


class ServerConfig(BaseModel, frozen=True):
    """Server bind settings."""

    host: str
    port: int

    @property
    def bind(self) -> str:
        """host:port string for log output."""
        return f"{self.host}:{self.port}"
