from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from examflow.core.errors import ConfigurationError, MissingInputError, classify_error
from examflow.domain.models import ExtractionResult
from examflow.infra.ocr.vision_llm import VisionLLMOCR
from examflow.infra.ports.llm import LLMPort
from examflow.infra.ports.ocr import OCRPort
from examflow.infra.ports.storage import StoragePort
from examflow.workers.extraction.encoding import CHUNK_SIZE, encode_document
from examflow.workers.extraction.loader import BinaryLoader
from examflow.workers.extraction.ocr_stage import OCRStage
from examflow.workers.extraction.structuring import StructuringStage

if TYPE_CHECKING:
    from examflow.core.config import Settings

logger = logging.getLogger(__name__)

TWO_STAGE = "two_stage"
SINGLE_STAGE = "single_stage"


@dataclass(frozen=True)
class PipelineConfig:
    llm_api_key: str | None
    ocr_api_key: str | None = None
    model: str | None = None
    extraction_mode: str = TWO_STAGE
    ocr_timeout_seconds: float = 60
    llm_timeout_seconds: float = 60
    chunk_size: int = CHUNK_SIZE

    @classmethod
    def from_settings(cls, settings: Settings) -> PipelineConfig:
        return cls(
            llm_api_key=settings.llm_api_key,
            ocr_api_key=settings.ocr_api_key,
            model=settings.llm_model,
            extraction_mode=settings.extraction_mode,
            ocr_timeout_seconds=settings.ocr_timeout_seconds,
            llm_timeout_seconds=settings.llm_timeout_seconds,
        )


class QuestionExtractionPipeline:
    """Storage key in, validated question list out.

    load -> base64 encode -> OCR (two-stage mode only) -> structure. Any failure
    aborts the run and surfaces as a classified ``ExtractionError``.
    """

    def __init__(
        self,
        *,
        config: PipelineConfig,
        storage: StoragePort,
        llm: LLMPort,
        specialized_ocr: OCRPort | None = None,
    ):
        self.config = config
        self.loader = BinaryLoader(storage=storage)
        self.ocr = OCRStage(
            vision=VisionLLMOCR(llm=llm, model=config.model, timeout_seconds=config.ocr_timeout_seconds),
            specialized=specialized_ocr if config.ocr_api_key else None,
        )
        self.structuring = StructuringStage(
            llm=llm,
            model=config.model,
            timeout_seconds=config.llm_timeout_seconds,
        )

    def run(self, file_path: str | None) -> ExtractionResult:
        if not file_path or not file_path.strip():
            raise MissingInputError()
        if not self.config.llm_api_key:
            logger.error("LLM gateway credential is missing")
            raise ConfigurationError()

        logger.info("Processing file: %s", file_path)
        try:
            document = self.loader.load(file_path)
            payload = encode_document(document, self.config.chunk_size)

            if self.config.extraction_mode == SINGLE_STAGE:
                logger.info("Structuring document directly mode=%s", SINGLE_STAGE)
                questions = self.structuring.from_document(payload)
                return ExtractionResult(questions=questions, ocr_engine=None, text_length=0)

            text, strategy = self.ocr.run(payload)
            logger.info("Parsing OCR text into questions text_length=%d", len(text))
            questions = self.structuring.from_text(text)
            return ExtractionResult(questions=questions, ocr_engine=strategy.value, text_length=len(text))
        except Exception as exc:
            error = classify_error(exc)
            if error is not exc:
                logger.error("Extraction failed kind=%s cause=%s", error.kind.value, exc)
                raise error from exc
            logger.error("Extraction failed kind=%s message=%s", error.kind.value, error.message)
            raise
