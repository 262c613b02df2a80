from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

ChatMessage = dict[str, Any]


class LLMPort(ABC):
    provider_name: str = "llm"

    @abstractmethod
    def chat(
        self,
        *,
        messages: list[ChatMessage],
        model: str | None = None,
        timeout_seconds: float | None = None,
    ) -> str:
        """Send chat messages and return the assistant's text reply."""


def image_part(data_url: str) -> dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": data_url}}


def text_part(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}
