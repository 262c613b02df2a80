from __future__ import annotations

from examflow.domain.models import EncodedPayload
from examflow.infra.ports.llm import LLMPort, image_part, text_part
from examflow.infra.ports.ocr import OCRPort

OCR_SYSTEM_PROMPT = (
    "You are an OCR expert. Extract ALL text from the provided image or PDF document. "
    "Preserve the exact formatting, structure, and order of the text. "
    "Include question numbers, options, and any other visible text."
)
OCR_USER_PROMPT = (
    "Extract all text from this document using OCR. Maintain the original structure and formatting."
)


class VisionLLMOCR(OCRPort):
    """Transcribe a document by attaching it to a multimodal chat request."""

    provider_name = "vision_llm"

    def __init__(self, *, llm: LLMPort, model: str | None = None, timeout_seconds: float | None = None):
        self.llm = llm
        self.model = model
        self.timeout_seconds = timeout_seconds

    def extract_text(self, payload: EncodedPayload) -> str:
        messages = [
            {"role": "system", "content": OCR_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [image_part(payload.data_url()), text_part(OCR_USER_PROMPT)],
            },
        ]
        return self.llm.chat(messages=messages, model=self.model, timeout_seconds=self.timeout_seconds)
