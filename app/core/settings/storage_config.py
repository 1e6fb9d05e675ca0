"""Chat record storage configuration."""

from pydantic import BaseModel


class StorageConfig(BaseModel, frozen=True):
    """Storage key settings for the two chat collections."""

    key_prefix: str
    history_key: str
    saved_key: str

    @property
    def history_storage_key(self) -> str:
        """Fully qualified key for the history collection."""
        return f"{self.key_prefix}{self.history_key}"

    @property
    def saved_storage_key(self) -> str:
        """Fully qualified key for the saved collection."""
        return f"{self.key_prefix}{self.saved_key}"
