from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
_DEFAULT_MODEL = "google/gemini-2.5-flash"
_EXTRACTION_MODES = {"two_stage", "single_stage"}


def _load_dotenv() -> None:
    if os.getenv("EXAMFLOW_SKIP_DOTENV") == "1":
        return

    env_path = Path(__file__).resolve().parents[2] / ".env"
    if not env_path.exists():
        return

    from dotenv import load_dotenv

    load_dotenv(env_path, override=False)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_positive_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    raw = value.strip()
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    env: str
    app_name: str
    log_level: str
    cors_origins: list[str]
    storage_backend: str
    upload_dir: Path
    storage_bucket: str
    supabase_url: str | None
    supabase_service_key: str | None
    llm_backend: str
    llm_api_key: str | None
    llm_gateway_url: str
    llm_model: str
    ocr_api_key: str | None
    ocr_timeout_seconds: int
    llm_timeout_seconds: int
    extraction_mode: str
    max_upload_bytes: int
    host: str
    port: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_dotenv()

    extraction_mode = (os.getenv("EXAMFLOW_EXTRACTION_MODE") or "two_stage").strip().lower()
    if extraction_mode not in _EXTRACTION_MODES:
        extraction_mode = "two_stage"

    return Settings(
        env=os.getenv("EXAMFLOW_ENV", "development"),
        app_name="ExamFlow API",
        log_level=(os.getenv("EXAMFLOW_LOG_LEVEL") or "INFO").upper(),
        cors_origins=_split_csv(os.getenv("EXAMFLOW_CORS_ORIGINS", "*")) or ["*"],
        storage_backend=(os.getenv("EXAMFLOW_STORAGE_BACKEND") or "local").strip().lower(),
        upload_dir=Path(os.getenv("EXAMFLOW_UPLOAD_DIR", "uploads")),
        storage_bucket=os.getenv("EXAMFLOW_STORAGE_BUCKET", "exam-files"),
        supabase_url=_optional(os.getenv("SUPABASE_URL")),
        supabase_service_key=_optional(os.getenv("SUPABASE_SERVICE_ROLE_KEY")),
        llm_backend=(os.getenv("EXAMFLOW_LLM_BACKEND") or "gateway").strip().lower(),
        llm_api_key=_optional(os.getenv("EXAMFLOW_LLM_API_KEY")),
        llm_gateway_url=os.getenv("EXAMFLOW_LLM_GATEWAY_URL", _DEFAULT_GATEWAY_URL),
        llm_model=os.getenv("EXAMFLOW_LLM_MODEL", _DEFAULT_MODEL),
        ocr_api_key=_optional(os.getenv("EXAMFLOW_OCR_API_KEY")),
        ocr_timeout_seconds=_parse_positive_int(os.getenv("EXAMFLOW_OCR_TIMEOUT_SECONDS"), default=60),
        llm_timeout_seconds=_parse_positive_int(os.getenv("EXAMFLOW_LLM_TIMEOUT_SECONDS"), default=60),
        extraction_mode=extraction_mode,
        max_upload_bytes=_parse_positive_int(os.getenv("EXAMFLOW_MAX_UPLOAD_BYTES"), default=10 * 1024 * 1024),
        host=os.getenv("EXAMFLOW_HOST", "127.0.0.1"),
        port=_parse_positive_int(os.getenv("EXAMFLOW_PORT"), default=8000),
    )
