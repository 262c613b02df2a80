from __future__ import annotations

from abc import ABC, abstractmethod

from examflow.domain.models import EncodedPayload


class OCRPort(ABC):
    provider_name: str = "ocr"

    @abstractmethod
    def extract_text(self, payload: EncodedPayload) -> str:
        """Return the transcribed text of one encoded document."""
