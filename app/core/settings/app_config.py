"""Application environment configuration."""

from typing import Literal

from pydantic import BaseModel

AppEnv = Literal["development", "staging", "production"]


class AppConfig(BaseModel, frozen=True):
    """Application name, environment and debug flag."""

    name: str
    env: AppEnv
    debug: bool
    version: str = "0.1.0"

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def docs_enabled(self) -> bool:
        """Interactive API docs are served outside production only."""
        return not self.is_production
