from __future__ import annotations

import json
import logging
import re
from typing import Any

from examflow.core.errors import INVALID_FORMAT_MESSAGE, StructuringError
from examflow.domain.models import ANSWER_LETTERS, OPTION_COUNT, EncodedPayload, Question
from examflow.infra.ports.llm import ChatMessage, LLMPort, image_part, text_part

logger = logging.getLogger(__name__)

STRUCTURING_SYSTEM_PROMPT = """You are an expert at parsing exam questions from text. Extract ALL multiple-choice questions from the provided text. For each question, provide:
1. The question text
2. Four options (A, B, C, D)
3. The correct answer (A, B, C, or D)

Return ONLY a JSON array with this exact structure:
[
  {
    "question": "Question text here?",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": "A"
  }
]

If you cannot find any questions, return an empty array [].
Do not include any markdown formatting or explanations, just the raw JSON array."""

TEXT_USER_PROMPT = (
    "Here is the OCR-extracted text from an exam document. "
    "Parse it and extract all multiple-choice questions:\n\n"
)
DOCUMENT_USER_PROMPT = "Extract all multiple-choice questions from this exam document."

_LEADING_FENCE = re.compile(r"^```[A-Za-z]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```\s*$")


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _to_question(item: Any) -> Question:
    if not isinstance(item, dict):
        raise StructuringError(INVALID_FORMAT_MESSAGE)

    question = item.get("question")
    options = item.get("options")
    answer = item.get("correctAnswer")

    if not isinstance(question, str) or not question.strip():
        raise StructuringError(INVALID_FORMAT_MESSAGE)
    # Exactly four options, lettered A-D, regardless of the source layout.
    if not isinstance(options, list) or len(options) != OPTION_COUNT:
        raise StructuringError(INVALID_FORMAT_MESSAGE)
    if not all(isinstance(option, (str, int, float)) and not isinstance(option, bool) for option in options):
        raise StructuringError(INVALID_FORMAT_MESSAGE)
    if not isinstance(answer, str) or answer.strip().upper() not in ANSWER_LETTERS:
        raise StructuringError(INVALID_FORMAT_MESSAGE)

    return Question(
        question=question.strip(),
        options=tuple(str(option) for option in options),  # type: ignore[arg-type]
        correct_answer=answer.strip().upper(),  # type: ignore[arg-type]
    )


def parse_questions(raw: str) -> list[Question]:
    """Turn a model reply into validated questions; raises ``StructuringError``."""
    try:
        data = json.loads(strip_code_fences(raw))
    except (TypeError, ValueError) as exc:
        logger.error("Failed to parse structuring response: %s", exc)
        raise StructuringError() from exc

    if not isinstance(data, list):
        logger.error("Structuring response is not an array type=%s", type(data).__name__)
        raise StructuringError(INVALID_FORMAT_MESSAGE)

    return [_to_question(item) for item in data]


def build_text_messages(extracted_text: str) -> list[ChatMessage]:
    return [
        {"role": "system", "content": STRUCTURING_SYSTEM_PROMPT},
        {"role": "user", "content": TEXT_USER_PROMPT + extracted_text},
    ]


def build_document_messages(payload: EncodedPayload) -> list[ChatMessage]:
    return [
        {"role": "system", "content": STRUCTURING_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [image_part(payload.data_url()), text_part(DOCUMENT_USER_PROMPT)],
        },
    ]


class StructuringStage:
    def __init__(self, *, llm: LLMPort, model: str | None = None, timeout_seconds: float | None = None):
        self.llm = llm
        self.model = model
        self.timeout_seconds = timeout_seconds

    def _run(self, messages: list[ChatMessage]) -> list[Question]:
        raw = self.llm.chat(messages=messages, model=self.model, timeout_seconds=self.timeout_seconds)
        logger.debug("Structuring response preview=%r", raw[:500])
        questions = parse_questions(raw)
        logger.info("Structured %d questions", len(questions))
        return questions

    def from_text(self, extracted_text: str) -> list[Question]:
        return self._run(build_text_messages(extracted_text))

    def from_document(self, payload: EncodedPayload) -> list[Question]:
        return self._run(build_document_messages(payload))
