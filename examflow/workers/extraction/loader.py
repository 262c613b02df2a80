from __future__ import annotations

import logging

from examflow.core.errors import StorageError
from examflow.domain.models import Document, DocumentKind
from examflow.infra.ports.storage import StoragePort

logger = logging.getLogger(__name__)


def detect_kind(key: str) -> DocumentKind:
    """Guess the document kind from the key's extension. No content sniffing."""
    lower = key.lower()
    if lower.endswith(".pdf"):
        return "pdf"
    if lower.endswith((".jpg", ".jpeg")):
        return "jpeg"
    return "png"


class BinaryLoader:
    def __init__(self, *, storage: StoragePort):
        self.storage = storage

    def load(self, key: str) -> Document:
        try:
            data = self.storage.read_bytes(key)
        except Exception as exc:
            logger.error("Download failed key=%s error=%s", key, exc)
            raise StorageError() from exc

        document = Document(key=key, kind=detect_kind(key), data=bytes(data))
        logger.info("Loaded document key=%s kind=%s size=%d", key, document.kind, document.size)
        return document
