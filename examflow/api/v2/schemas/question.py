from typing import Literal

from pydantic import BaseModel, Field


class QuestionItem(BaseModel):
    question: str
    options: list[str] = Field(min_length=4, max_length=4)
    correctAnswer: Literal["A", "B", "C", "D"]


class ExtractQuestionsRequest(BaseModel):
    filePath: str | None = None


class ExtractQuestionsResponse(BaseModel):
    questions: list[QuestionItem]


class ErrorResponse(BaseModel):
    error: str
