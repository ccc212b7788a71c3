from typing import Any, List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

QuestionTypeName = Literal["Multiple Choice", "Fill in the blanks", "True/False", "Matching"]


class MatchingPairIn(BaseModel):
    left: str = Field(..., min_length=1)
    right: str = Field(..., min_length=1)


class QuestionIn(BaseModel):
    type: QuestionTypeName
    prompt: str = Field(..., min_length=1)
    choices: Optional[List[str]] = None
    answer: Optional[str] = None
    pairs: Optional[List[MatchingPairIn]] = None

    @model_validator(mode="after")
    def check_answer_key(self):
        if self.type == "Matching":
            if not self.pairs:
                raise ValueError("Matching questions need at least one pair")
            return self
        if self.answer is None or not self.answer.strip():
            raise ValueError(f"{self.type} questions need an answer")
        if self.type == "Multiple Choice":
            if not self.choices or len(self.choices) < 2:
                raise ValueError("Multiple Choice questions need at least two choices")
            if self.answer not in self.choices:
                raise ValueError("The answer must be one of the choices")
        if self.type == "True/False" and self.answer not in ("True", "False"):
            raise ValueError("True/False answers must be 'True' or 'False'")
        return self


class QuizCreateIn(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    isPublic: bool = True
    questions: List[QuestionIn] = []


class QuizUpdateIn(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    isPublic: Optional[bool] = None
    questions: Optional[List[QuestionIn]] = None


class QuizListItem(BaseModel):
    id: int
    title: str
    description: str
    createdBy: Optional[str] = None
    updatedAt: Optional[str] = None


class SubmissionIn(BaseModel):
    # Shape is checked by the scorer so a malformed submission comes back as 400
    answers: Any = None
    timeSpent: str = Field("0:00", pattern=r"^\d+:[0-5]\d$")


class QuestionResultOut(BaseModel):
    questionId: int
    isCorrect: bool


class ScoredResultOut(BaseModel):
    score: int
    total: int
    percentage: float
    details: List[QuestionResultOut]
    pointsEarned: int
    expEarned: int


class AttemptOut(BaseModel):
    id: int
    userId: str
    score: int
    totalQuestions: int
    percentage: float
    timeSpent: str
    pointsEarned: int
    expEarned: int
    completedAt: Optional[str] = None
