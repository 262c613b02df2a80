from __future__ import annotations

from abc import ABC, abstractmethod


class StoragePort(ABC):
    @abstractmethod
    def read_bytes(self, key: str) -> bytes:
        """Return the stored bytes for a key; raise if the object cannot be fetched."""

    @abstractmethod
    def save_bytes(self, key: str, data: bytes, content_type: str | None) -> str:
        """Persist bytes and return the key they can be read back with."""
