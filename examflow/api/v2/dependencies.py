from __future__ import annotations

from dataclasses import replace
from functools import lru_cache

from examflow.application.services import (
    ExamScoringService,
    ExtractionApplicationService,
    UploadApplicationService,
)
from examflow.core.config import get_settings
from examflow.infra.llm.gateway import GatewayLLM
from examflow.infra.llm.mock import MockLLM
from examflow.infra.ocr.filestack import FilestackOCR
from examflow.infra.ports.llm import LLMPort
from examflow.infra.ports.ocr import OCRPort
from examflow.infra.ports.storage import StoragePort
from examflow.infra.storage.local import LocalFileStorage
from examflow.infra.storage.supabase import SupabaseStorage
from examflow.workers.extraction import PipelineConfig, QuestionExtractionPipeline


@lru_cache(maxsize=1)
def get_storage() -> StoragePort:
    settings = get_settings()
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise RuntimeError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required when EXAMFLOW_STORAGE_BACKEND=supabase"
            )
        return SupabaseStorage(
            base_url=settings.supabase_url,
            service_key=settings.supabase_service_key,
            bucket=settings.storage_bucket,
        )
    return LocalFileStorage(base_dir=settings.upload_dir)


@lru_cache(maxsize=1)
def get_llm() -> LLMPort:
    settings = get_settings()
    if settings.llm_backend == "mock":
        return MockLLM()
    return GatewayLLM(
        api_key=settings.llm_api_key or "",
        url=settings.llm_gateway_url,
        model_name=settings.llm_model,
        timeout_seconds=settings.llm_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_specialized_ocr() -> OCRPort | None:
    settings = get_settings()
    if not settings.ocr_api_key or settings.llm_backend == "mock":
        return None
    return FilestackOCR(api_key=settings.ocr_api_key, timeout_seconds=settings.ocr_timeout_seconds)


def get_pipeline() -> QuestionExtractionPipeline:
    settings = get_settings()
    config = PipelineConfig.from_settings(settings)
    if settings.llm_backend == "mock":
        config = replace(config, llm_api_key=config.llm_api_key or "mock")
    return QuestionExtractionPipeline(
        config=config,
        storage=get_storage(),
        llm=get_llm(),
        specialized_ocr=get_specialized_ocr(),
    )


def get_extraction_service() -> ExtractionApplicationService:
    return ExtractionApplicationService(pipeline_factory=get_pipeline)


def get_upload_service() -> UploadApplicationService:
    return UploadApplicationService(storage=get_storage(), max_bytes=get_settings().max_upload_bytes)


def get_scoring_service() -> ExamScoringService:
    return ExamScoringService()


async def provide_extraction_service() -> ExtractionApplicationService:
    return get_extraction_service()


async def provide_upload_service() -> UploadApplicationService:
    return get_upload_service()


async def provide_scoring_service() -> ExamScoringService:
    return get_scoring_service()
