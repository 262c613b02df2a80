from __future__ import annotations

import json

import pytest

from examflow.api.v2.dependencies import provide_extraction_service
from examflow.application.services import ExtractionApplicationService
from examflow.core.errors import ProviderHTTPError
from examflow.main import app
from examflow.workers.extraction import PipelineConfig, QuestionExtractionPipeline
from tests.fakes import InMemoryStorage, ScriptedLLM
from tests.http_client import SyncASGIClient

OCR_TEXT = "1. What is 2+2? A) 3 B) 4 C) 5 D) 6 Answer: B"
QUESTION = {"question": "What is 2+2?", "options": ["3", "4", "5", "6"], "correctAnswer": "B"}


@pytest.fixture
def install_pipeline():
    def _install(llm: ScriptedLLM, objects: dict[str, bytes] | None = None) -> ScriptedLLM:
        pipeline = QuestionExtractionPipeline(
            config=PipelineConfig(llm_api_key="llm-key", model="test-model"),
            storage=InMemoryStorage(objects),
            llm=llm,
        )
        app.dependency_overrides[provide_extraction_service] = lambda: ExtractionApplicationService(
            pipeline_factory=lambda: pipeline
        )
        return llm

    yield _install
    app.dependency_overrides.clear()


def test_png_end_to_end(install_pipeline):
    install_pipeline(
        ScriptedLLM(ocr_reply=OCR_TEXT, structuring_reply=json.dumps([QUESTION])),
        objects={"123.png": bytes(range(50))},
    )
    client = SyncASGIClient(app)

    resp = client.post("/v2/extract-questions", json={"filePath": "123.png"})

    assert resp.status_code == 200
    assert resp.json() == {"questions": [QUESTION]}


def test_missing_file_path_is_400(install_pipeline):
    llm = install_pipeline(ScriptedLLM())
    client = SyncASGIClient(app)

    resp = client.post("/v2/extract-questions", json={})

    assert resp.status_code == 400
    assert resp.json() == {"error": "File path is required"}
    assert llm.calls == []


def test_prose_from_model_is_500(install_pipeline):
    install_pipeline(
        ScriptedLLM(ocr_reply=OCR_TEXT, structuring_reply="Here are the questions you asked for!"),
        objects={"123.png": b"img"},
    )
    client = SyncASGIClient(app)

    resp = client.post("/v2/extract-questions", json={"filePath": "123.png"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to parse extracted questions"}


def test_non_array_from_model_is_500(install_pipeline):
    install_pipeline(ScriptedLLM(ocr_reply=OCR_TEXT, structuring_reply="{}"), objects={"1.png": b"img"})

    resp = SyncASGIClient(app).post("/v2/extract-questions", json={"filePath": "1.png"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Invalid questions format"}


def test_no_questions_is_200_with_empty_list(install_pipeline):
    install_pipeline(ScriptedLLM(ocr_reply="blank", structuring_reply="```json\n[]\n```"), objects={"1.png": b"i"})

    resp = SyncASGIClient(app).post("/v2/extract-questions", json={"filePath": "1.png"})

    assert resp.status_code == 200
    assert resp.json() == {"questions": []}


@pytest.mark.parametrize(
    ("status", "message"),
    [
        (429, "Rate limit exceeded. Please try again later."),
        (402, "AI credits depleted. Please add funds to continue."),
        (503, "AI processing failed"),
    ],
)
def test_provider_errors_map_to_status(install_pipeline, status: int, message: str):
    install_pipeline(
        ScriptedLLM(ocr_reply=OCR_TEXT, structuring_reply=ProviderHTTPError("llm_gateway", status, "x")),
        objects={"1.png": b"i"},
    )

    resp = SyncASGIClient(app).post("/v2/extract-questions", json={"filePath": "1.png"})

    assert resp.status_code == (500 if status == 503 else status)
    assert resp.json() == {"error": message}


def test_download_failure_is_500(install_pipeline):
    install_pipeline(ScriptedLLM())

    resp = SyncASGIClient(app).post("/v2/extract-questions", json={"filePath": "nope.pdf"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to download file"}


def test_malformed_body_is_400(install_pipeline):
    install_pipeline(ScriptedLLM())

    resp = SyncASGIClient(app).post(
        "/v2/extract-questions",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_cors_preflight_and_headers(install_pipeline):
    install_pipeline(ScriptedLLM())
    client = SyncASGIClient(app)

    preflight = client.options(
        "/v2/extract-questions",
        headers={
            "Origin": "https://exam.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type, x-request-id",
        },
    )
    assert preflight.status_code == 200
    assert preflight.content == b""
    assert preflight.headers["access-control-allow-origin"] == "*"
    assert preflight.headers["access-control-allow-headers"] == "content-type, x-request-id"

    bare = client.options("/v2/extract-questions")
    assert bare.status_code == 200
    assert bare.content == b""
    assert bare.headers["access-control-allow-origin"] == "*"
    assert bare.headers["access-control-allow-headers"] == "authorization, x-client-info, apikey, content-type"

    failed = client.post("/v2/extract-questions", json={}, headers={"Origin": "https://exam.example"})
    assert failed.status_code == 400
    assert failed.headers["access-control-allow-origin"] == "*"

    no_origin = client.post("/v2/extract-questions", json={})
    assert no_origin.status_code == 400
    assert no_origin.headers["access-control-allow-origin"] == "*"


def test_unexpected_error_is_500_with_cors_headers():
    def _broken_pipeline():
        raise RuntimeError("storage backend misconfigured")

    app.dependency_overrides[provide_extraction_service] = lambda: ExtractionApplicationService(
        pipeline_factory=_broken_pipeline
    )
    try:
        resp = SyncASGIClient(app).post("/v2/extract-questions", json={"filePath": "1.png"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {"error": "Unknown error occurred"}
    assert resp.headers["access-control-allow-origin"] == "*"
