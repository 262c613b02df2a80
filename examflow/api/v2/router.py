from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from examflow.api.v2.dependencies import (
    provide_extraction_service,
    provide_scoring_service,
    provide_upload_service,
)
from examflow.api.v2.schemas.exam import QuestionResultItem, ScoreRequest, ScoreResponse
from examflow.api.v2.schemas.question import ExtractQuestionsRequest, ExtractQuestionsResponse, QuestionItem
from examflow.api.v2.schemas.upload import UploadResponse
from examflow.application.services import (
    ExamScoringService,
    ExtractionApplicationService,
    UnsupportedUploadError,
    UploadApplicationService,
    UploadTooLargeError,
)
from examflow.domain.models import Question

router = APIRouter(prefix="/v2", tags=["v2"])


@router.post("/extract-questions", response_model=ExtractQuestionsResponse)
def extract_questions(
    body: ExtractQuestionsRequest | None = None,
    service: ExtractionApplicationService = Depends(provide_extraction_service),
):
    result = service.extract_questions(file_path=body.filePath if body else None)
    return ExtractQuestionsResponse(
        questions=[QuestionItem(**item.to_dict()) for item in result.questions],
    )


@router.post("/files", response_model=UploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    service: UploadApplicationService = Depends(provide_upload_service),
):
    payload = await file.read()
    try:
        key = service.store_upload(filename=file.filename, content_type=file.content_type, payload=payload)
    except UnsupportedUploadError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except UploadTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    return UploadResponse(filePath=key)


@router.post("/exams/score", response_model=ScoreResponse)
async def score_exam(
    body: ScoreRequest,
    service: ExamScoringService = Depends(provide_scoring_service),
):
    questions = [
        Question(question=item.question, options=tuple(item.options), correct_answer=item.correctAnswer)
        for item in body.questions
    ]
    try:
        result = service.score(questions=questions, answers=body.answers)
    except (ValueError, IndexError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return ScoreResponse(
        score=result.score,
        total=result.total,
        percentage=round(result.percentage, 1),
        results=[QuestionResultItem(**item.to_dict()) for item in result.results],
    )
