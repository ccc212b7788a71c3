from dataclasses import dataclass, field
from typing import Any, List, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..core.errors import InvalidSubmissionError
from ..domain.model import Question
from .answer_matcher import is_correct


class SubmissionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    questionId: int = Field(..., validation_alias=AliasChoices("questionId", "question_id"))
    # Shape depends on the question type; the matcher decides what it accepts
    answer: Any = None

    @field_validator("questionId", mode="before")
    @classmethod
    def _no_bool_ids(cls, v: Any) -> Any:
        # lax int parsing would turn true into question 1
        if isinstance(v, bool):
            raise ValueError("questionId must be a number")
        return v


_entries = TypeAdapter(List[SubmissionEntry])


@dataclass(frozen=True)
class QuestionResult:
    question_id: int
    is_correct: bool

    def to_dict(self) -> dict:
        return {"questionId": self.question_id, "isCorrect": self.is_correct}


@dataclass(frozen=True)
class ScoredResult:
    score: int
    total: int
    details: List[QuestionResult] = field(default_factory=list)

    @property
    def percentage(self) -> float:
        if not self.total:
            return 0.0
        return round(self.score / self.total * 100, 2)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "total": self.total,
            "percentage": self.percentage,
            "details": [d.to_dict() for d in self.details],
        }


def parse_submission(raw: Any) -> List[SubmissionEntry]:
    if not isinstance(raw, (list, tuple)):
        raise InvalidSubmissionError("Submission must be a list of answers")
    try:
        return _entries.validate_python(list(raw))
    except ValidationError as exc:
        raise InvalidSubmissionError("Every answer needs an integer questionId") from exc


def score_submission(questions: Sequence[Question], submission: Any) -> ScoredResult:
    """Score one quiz attempt.

    ``questions`` is the trusted, server-side list and decides both the
    order of ``details`` and the total. Submitted entries are looked up by
    question id; unknown ids are ignored and the first entry wins when an id
    repeats. Questions without an entry count as wrong.
    """
    if not isinstance(questions, (list, tuple)):
        raise TypeError(f"questions must be a list, got {type(questions).__name__}")

    answers: dict[int, Any] = {}
    for entry in parse_submission(submission):
        answers.setdefault(entry.questionId, entry.answer)

    details = [
        QuestionResult(question_id=q.id, is_correct=is_correct(q, answers.get(q.id)))
        for q in questions
    ]
    return ScoredResult(
        score=sum(1 for d in details if d.is_correct),
        total=len(questions),
        details=details,
    )
