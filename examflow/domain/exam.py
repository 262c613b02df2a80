"""In-memory exam session: navigation, answers and scoring.

Nothing here is persisted. A session lives as long as the caller keeps it and
the result is handed straight to whoever renders the review.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from examflow.domain.models import ANSWER_LETTERS, Question


@dataclass(frozen=True)
class QuestionResult:
    question: str
    options: tuple[str, ...]
    user_answer: str
    correct_answer: str
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "options": list(self.options),
            "userAnswer": self.user_answer,
            "correctAnswer": self.correct_answer,
            "isCorrect": self.is_correct,
        }


@dataclass(frozen=True)
class ExamResult:
    results: list[QuestionResult]
    score: int
    total: int

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.score / self.total * 100

    def incorrect(self) -> list[QuestionResult]:
        return [item for item in self.results if not item.is_correct]


@dataclass
class ExamSession:
    questions: list[Question]
    current_index: int = 0
    answers: dict[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.questions:
            raise ValueError("An exam needs at least one question")

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current(self) -> Question:
        return self.questions[self.current_index]

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def progress(self) -> float:
        return (self.current_index + 1) / self.total * 100

    @property
    def is_last(self) -> bool:
        return self.current_index == self.total - 1

    def select(self, letter: str, index: int | None = None) -> None:
        letter = letter.strip().upper()
        if letter not in ANSWER_LETTERS:
            raise ValueError(f"Answer must be one of {', '.join(ANSWER_LETTERS)}")
        target = self.current_index if index is None else index
        if not 0 <= target < self.total:
            raise IndexError(f"Question index out of range: {target}")
        self.answers[target] = letter

    def next(self) -> int:
        if self.current_index < self.total - 1:
            self.current_index += 1
        return self.current_index

    def previous(self) -> int:
        if self.current_index > 0:
            self.current_index -= 1
        return self.current_index

    def submit(self) -> ExamResult:
        results: list[QuestionResult] = []
        score = 0
        for idx, item in enumerate(self.questions):
            user_answer = self.answers.get(idx, "")
            is_correct = user_answer == item.correct_answer
            if is_correct:
                score += 1
            results.append(
                QuestionResult(
                    question=item.question,
                    options=tuple(item.options),
                    user_answer=user_answer,
                    correct_answer=item.correct_answer,
                    is_correct=is_correct,
                )
            )
        return ExamResult(results=results, score=score, total=self.total)
