from __future__ import annotations

import logging
from enum import Enum

from examflow.domain.models import DocumentKind, EncodedPayload
from examflow.infra.ports.ocr import OCRPort

logger = logging.getLogger(__name__)


class OCRStrategy(str, Enum):
    SPECIALIZED = "specialized"
    VISION_LLM = "vision_llm"


def plan_ocr(kind: DocumentKind, specialized_available: bool) -> tuple[OCRStrategy, ...]:
    """Ordered strategies to attempt. Later entries run only if earlier ones fail."""
    if kind == "pdf" and specialized_available:
        return (OCRStrategy.SPECIALIZED, OCRStrategy.VISION_LLM)
    return (OCRStrategy.VISION_LLM,)


class OCRStage:
    def __init__(self, *, vision: OCRPort, specialized: OCRPort | None = None):
        self.vision = vision
        self.specialized = specialized

    def _port_for(self, strategy: OCRStrategy) -> OCRPort:
        if strategy is OCRStrategy.SPECIALIZED:
            if self.specialized is None:
                raise RuntimeError("Specialized OCR is not configured")
            return self.specialized
        return self.vision

    def run(self, payload: EncodedPayload) -> tuple[str, OCRStrategy]:
        plan = plan_ocr(payload.kind, self.specialized is not None)
        for position, strategy in enumerate(plan):
            port = self._port_for(strategy)
            logger.info("Running OCR strategy=%s provider=%s", strategy.value, port.provider_name)
            try:
                text = port.extract_text(payload)
            except Exception as exc:
                if position == len(plan) - 1:
                    raise
                logger.warning(
                    "OCR strategy=%s failed, falling back to %s: %s",
                    strategy.value,
                    plan[position + 1].value,
                    exc,
                )
                continue
            logger.info("OCR extracted text length=%d", len(text))
            return text, strategy
        raise RuntimeError("No OCR strategy available")
