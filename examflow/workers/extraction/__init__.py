from examflow.workers.extraction.encoding import encode_base64, encode_document
from examflow.workers.extraction.loader import BinaryLoader, detect_kind
from examflow.workers.extraction.ocr_stage import OCRStage, OCRStrategy, plan_ocr
from examflow.workers.extraction.pipeline import PipelineConfig, QuestionExtractionPipeline
from examflow.workers.extraction.structuring import StructuringStage, parse_questions, strip_code_fences

__all__ = [
    "BinaryLoader",
    "OCRStage",
    "OCRStrategy",
    "PipelineConfig",
    "QuestionExtractionPipeline",
    "StructuringStage",
    "detect_kind",
    "encode_base64",
    "encode_document",
    "parse_questions",
    "plan_ocr",
    "strip_code_fences",
]
