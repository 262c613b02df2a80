from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

DocumentKind = Literal["pdf", "jpeg", "png"]
AnswerLetter = Literal["A", "B", "C", "D"]

ANSWER_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")
OPTION_COUNT = len(ANSWER_LETTERS)

_MIME_TYPES: dict[str, str] = {
    "pdf": "application/pdf",
    "jpeg": "image/jpeg",
    "png": "image/png",
}


def mime_type_for(kind: DocumentKind) -> str:
    return _MIME_TYPES[kind]


@dataclass(frozen=True)
class Document:
    key: str
    kind: DocumentKind
    data: bytes = field(repr=False)

    @property
    def mime_type(self) -> str:
        return mime_type_for(self.kind)

    @property
    def is_paginated(self) -> bool:
        return self.kind == "pdf"

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class EncodedPayload:
    kind: DocumentKind
    data: str = field(repr=False)

    @property
    def mime_type(self) -> str:
        return mime_type_for(self.kind)

    @property
    def is_paginated(self) -> bool:
        return self.kind == "pdf"

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class Question:
    question: str
    options: tuple[str, str, str, str]
    correct_answer: AnswerLetter

    def to_dict(self) -> dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
        }


@dataclass
class ExtractionResult:
    questions: list[Question]
    ocr_engine: str | None = None
    text_length: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.questions
