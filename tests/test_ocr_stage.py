import pytest

from examflow.core.errors import ProviderHTTPError
from examflow.domain.models import EncodedPayload
from examflow.workers.extraction.ocr_stage import OCRStage, OCRStrategy, plan_ocr
from tests.fakes import StubOCR

PDF = EncodedPayload(kind="pdf", data="JVBERi0xLjQ=")
PNG = EncodedPayload(kind="png", data="iVBORw0K")


def test_plan_prefers_specialized_only_for_configured_pdf():
    assert plan_ocr("pdf", True) == (OCRStrategy.SPECIALIZED, OCRStrategy.VISION_LLM)
    assert plan_ocr("pdf", False) == (OCRStrategy.VISION_LLM,)
    assert plan_ocr("png", True) == (OCRStrategy.VISION_LLM,)
    assert plan_ocr("jpeg", True) == (OCRStrategy.VISION_LLM,)


def test_specialized_success_skips_vision():
    specialized = StubOCR("1. Question from document OCR")
    vision = StubOCR("vision text")
    stage = OCRStage(vision=vision, specialized=specialized)

    text, strategy = stage.run(PDF)

    assert text == "1. Question from document OCR"
    assert strategy is OCRStrategy.SPECIALIZED
    assert len(specialized.calls) == 1
    assert vision.calls == []


def test_specialized_failure_falls_back_to_vision_once():
    specialized = StubOCR(ProviderHTTPError("filestack", 500, "boom"))
    vision = StubOCR("vision text")
    stage = OCRStage(vision=vision, specialized=specialized)

    text, strategy = stage.run(PDF)

    assert text == "vision text"
    assert strategy is OCRStrategy.VISION_LLM
    assert len(specialized.calls) == 1
    assert len(vision.calls) == 1


def test_images_never_use_specialized():
    specialized = StubOCR("should not be used")
    vision = StubOCR("image text")
    stage = OCRStage(vision=vision, specialized=specialized)

    text, _ = stage.run(PNG)

    assert text == "image text"
    assert specialized.calls == []


def test_vision_failure_without_fallback_propagates():
    vision = StubOCR(ProviderHTTPError("llm_gateway", 429, "slow down"))
    stage = OCRStage(vision=vision)

    with pytest.raises(ProviderHTTPError):
        stage.run(PDF)


def test_both_strategies_failing_raises_last_error():
    specialized = StubOCR(RuntimeError("upload failed"))
    vision = StubOCR(ProviderHTTPError("llm_gateway", 402, "no credits"))
    stage = OCRStage(vision=vision, specialized=specialized)

    with pytest.raises(ProviderHTTPError) as excinfo:
        stage.run(PDF)

    assert excinfo.value.status_code == 402
    assert len(vision.calls) == 1
