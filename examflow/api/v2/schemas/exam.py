from pydantic import BaseModel, Field

from examflow.api.v2.schemas.question import QuestionItem


class ScoreRequest(BaseModel):
    questions: list[QuestionItem] = Field(min_length=1)
    answers: dict[int, str] = Field(default_factory=dict)


class QuestionResultItem(BaseModel):
    question: str
    options: list[str]
    userAnswer: str
    correctAnswer: str
    isCorrect: bool


class ScoreResponse(BaseModel):
    score: int
    total: int
    percentage: float
    results: list[QuestionResultItem]
