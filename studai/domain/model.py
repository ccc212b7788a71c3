from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "Multiple Choice"
    FILL_IN_BLANK = "Fill in the blanks"
    TRUE_FALSE = "True/False"
    MATCHING = "Matching"


@dataclass(frozen=True)
class MatchingPair:
    left: str
    right: str


@dataclass(frozen=True)
class MultipleChoiceQuestion:
    id: int
    prompt: str
    choices: tuple[str, ...]
    answer: Optional[str]
    type: QuestionType = field(default=QuestionType.MULTIPLE_CHOICE, init=False)


@dataclass(frozen=True)
class FillInBlankQuestion:
    id: int
    prompt: str
    answer: Optional[str]
    type: QuestionType = field(default=QuestionType.FILL_IN_BLANK, init=False)


@dataclass(frozen=True)
class TrueFalseQuestion:
    id: int
    prompt: str
    answer: Optional[str]
    type: QuestionType = field(default=QuestionType.TRUE_FALSE, init=False)


@dataclass(frozen=True)
class MatchingQuestion:
    id: int
    prompt: str
    pairs: Optional[tuple[MatchingPair, ...]]
    type: QuestionType = field(default=QuestionType.MATCHING, init=False)


@dataclass(frozen=True)
class UnsupportedQuestion:
    """A stored question whose type this service does not know how to score."""

    id: int
    prompt: str
    type_name: str

    @property
    def type(self) -> str:
        return self.type_name


Question = Union[
    MultipleChoiceQuestion,
    FillInBlankQuestion,
    TrueFalseQuestion,
    MatchingQuestion,
    UnsupportedQuestion,
]


@dataclass(frozen=True)
class Quiz:
    id: int
    title: str
    description: str
    is_public: bool
    created_by: Optional[str]
    # Supabase hands timestamps back as ISO strings
    created_at: Union[str, datetime, None] = None
    updated_at: Union[str, datetime, None] = None
    total_attempts: int = 0
    average_score: float = 0.0

    def readable_by(self, user_id: Optional[str]) -> bool:
        return self.is_public or (user_id is not None and self.created_by == user_id)

    def owned_by(self, user_id: Optional[str]) -> bool:
        return user_id is not None and self.created_by == user_id


@dataclass(frozen=True)
class QuizRules:
    points_per_correct: int = 10
    exp_per_correct: int = 5
    max_questions: int = 50
    leaderboard_size: int = 10
