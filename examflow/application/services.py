from __future__ import annotations

import logging
from typing import Callable

from examflow.core.errors import ErrorKind, MissingInputError
from examflow.core.logging import bind_request_id
from examflow.domain.exam import ExamResult, ExamSession
from examflow.domain.models import ANSWER_LETTERS, ExtractionResult, Question
from examflow.infra.ports.storage import StoragePort
from examflow.utils.ids import new_upload_key
from examflow.workers.extraction import QuestionExtractionPipeline

logger = logging.getLogger(__name__)

_ALLOWED_UPLOADS = {
    "application/pdf": "pdf",
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
}


class UnsupportedUploadError(ValueError):
    pass


class UploadTooLargeError(ValueError):
    pass


class ExtractionApplicationService:
    def __init__(self, *, pipeline_factory: Callable[[], QuestionExtractionPipeline]):
        self.pipeline_factory = pipeline_factory

    def extract_questions(self, *, file_path: str | None) -> ExtractionResult:
        bind_request_id()
        if not file_path or not file_path.strip():
            raise MissingInputError()
        result = self.pipeline_factory().run(file_path)
        if result.is_empty:
            logger.warning("No questions found kind=%s file=%s", ErrorKind.EMPTY_RESULT.value, file_path)
        else:
            logger.info(
                "Successfully extracted %d questions engine=%s",
                len(result.questions),
                result.ocr_engine or "direct",
            )
        return result


class UploadApplicationService:
    def __init__(self, *, storage: StoragePort, max_bytes: int):
        self.storage = storage
        self.max_bytes = max_bytes

    def store_upload(self, *, filename: str | None, content_type: str | None, payload: bytes) -> str:
        mime = (content_type or "").split(";", 1)[0].strip().lower()
        ext = _ALLOWED_UPLOADS.get(mime)
        if ext is None:
            raise UnsupportedUploadError("Please upload a PDF or image file (PNG, JPG, JPEG)")
        if len(payload) > self.max_bytes:
            raise UploadTooLargeError(f"File size must be less than {self.max_bytes // (1024 * 1024)}MB")

        original_ext = (filename or "").rsplit(".", 1)[-1].lower() if filename and "." in filename else ""
        if original_ext in {"pdf", "png", "jpg", "jpeg"}:
            ext = original_ext
        key = new_upload_key(ext)
        self.storage.save_bytes(key, payload, mime)
        logger.info("Stored upload key=%s size=%d", key, len(payload))
        return key


class ExamScoringService:
    def score(self, *, questions: list[Question], answers: dict[int, str]) -> ExamResult:
        session = ExamSession(questions=questions)
        for index, letter in answers.items():
            if not letter:
                continue
            if letter.strip().upper() not in ANSWER_LETTERS:
                raise ValueError(f"Invalid answer {letter!r} for question {index}")
            session.select(letter, index=index)
        return session.submit()

