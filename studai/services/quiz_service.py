import logging
from typing import Any, List, Optional

from .typing import to_iso
from .scoring import score_submission
from .sanitizer import sanitize_data, sanitize_questions
from ..core.errors import QuestionNotFoundError, QuizAccessDeniedError, QuizNotFoundError, QuizValidationError
from ..domain.model import Question, Quiz, QuizRules
from ..domain.rows import question_from_row, question_to_row, quiz_from_row
from ..repositories.quiz_repository import QuizRepository

logger = logging.getLogger(__name__)


def time_spent_seconds(value: str) -> int:
    minutes, _, seconds = value.partition(":")
    return int(minutes) * 60 + int(seconds or 0)


def running_average(average: float, count: int, value: float) -> float:
    """Fold one more value into an average taken over ``count`` values."""
    return round((average * count + value) / (count + 1), 2)


class QuizService:
    def __init__(self, repo: QuizRepository, rules: QuizRules) -> None:
        self.repo = repo
        self.rules = rules

    # --- quizzes ---

    def list_quizzes(self) -> list[dict]:
        items = self.repo.list_public_quizzes()
        return [
            {
                "id": i["id"],
                "title": i["title"],
                "description": i.get("description") or "",
                "createdBy": i.get("created_by"),
                "updatedAt": to_iso(i.get("updated_at")),
            }
            for i in items
        ]

    def _fetch_quiz(self, quiz_id: int) -> Quiz:
        row = self.repo.get_quiz(quiz_id)
        if not row:
            raise QuizNotFoundError("Quiz not found")
        return quiz_from_row(row)

    def _load_quiz(self, quiz_id: int, user_id: Optional[str]) -> Quiz:
        quiz = self._fetch_quiz(quiz_id)
        if not quiz.readable_by(user_id):
            raise QuizAccessDeniedError("Access denied")
        return quiz

    def _load_owned_quiz(self, quiz_id: int, user_id: str) -> Quiz:
        quiz = self._fetch_quiz(quiz_id)
        if not quiz.owned_by(user_id):
            raise QuizAccessDeniedError("Not authorized")
        return quiz

    def load_questions(self, quiz_id: int) -> List[Question]:
        return [question_from_row(row) for row in self.repo.list_questions(quiz_id)]

    def get_quiz(self, quiz_id: int, user_id: Optional[str]) -> dict:
        quiz = self._load_quiz(quiz_id, user_id)
        data = {
            "id": quiz.id,
            "title": quiz.title,
            "description": quiz.description,
            "isPublic": quiz.is_public,
            "createdBy": quiz.created_by,
            "createdAt": to_iso(quiz.created_at),
            "updatedAt": to_iso(quiz.updated_at),
            "totalAttempts": quiz.total_attempts,
            "averageScore": quiz.average_score,
            "questions": sanitize_questions(self.load_questions(quiz_id)),
        }
        return sanitize_data(data)

    def get_questions(self, quiz_id: int, user_id: Optional[str]) -> list[dict]:
        self._load_quiz(quiz_id, user_id)
        return sanitize_data(sanitize_questions(self.load_questions(quiz_id)))

    def _check_question_count(self, questions: Optional[List[dict]]) -> None:
        if questions is not None and len(questions) > self.rules.max_questions:
            raise QuizValidationError(f"A quiz can have at most {self.rules.max_questions} questions")

    def create_quiz(self, user_id: str, title: str, description: str, is_public: bool, questions: List[dict]) -> int:
        self._check_question_count(questions)
        quiz_id = self.repo.create_quiz(title.strip(), description, is_public, user_id, questions)
        logger.info("Quiz %s created by %s with %d questions", quiz_id, user_id, len(questions))
        return quiz_id

    def update_quiz(
        self,
        quiz_id: int,
        user_id: str,
        title: Optional[str],
        description: Optional[str],
        is_public: Optional[bool],
        questions: Optional[List[dict]],
    ) -> None:
        self._load_owned_quiz(quiz_id, user_id)
        self._check_question_count(questions)
        fields: dict[str, Any] = {}
        if title is not None:
            fields["title"] = title.strip()
        if description is not None:
            fields["description"] = description
        if is_public is not None:
            fields["is_public"] = is_public
        self.repo.update_quiz(quiz_id, fields, questions)

    def delete_quiz(self, quiz_id: int, user_id: str) -> None:
        self._load_owned_quiz(quiz_id, user_id)
        self.repo.delete_quiz(quiz_id)
        logger.info("Quiz %s deleted by %s", quiz_id, user_id)

    # --- single questions ---

    def _load_owned_question(self, quiz_id: int, question_id: int, user_id: str) -> dict:
        self._load_owned_quiz(quiz_id, user_id)
        row = self.repo.get_question(quiz_id, question_id)
        if not row:
            raise QuestionNotFoundError("Question not found")
        return row

    def add_question(self, quiz_id: int, user_id: str, question: dict) -> int:
        self._load_owned_quiz(quiz_id, user_id)
        existing = self.repo.list_questions(quiz_id)
        if len(existing) >= self.rules.max_questions:
            raise QuizValidationError(f"A quiz can have at most {self.rules.max_questions} questions")
        position = max((r.get("question_order") or 0 for r in existing), default=-1) + 1
        question_id = self.repo.add_question(question_to_row(question, quiz_id, position))
        logger.info("Question %s added to quiz %s", question_id, quiz_id)
        return question_id

    def update_question(self, quiz_id: int, question_id: int, user_id: str, question: dict) -> None:
        current = self._load_owned_question(quiz_id, question_id, user_id)
        # the question keeps its slot in the quiz
        row = question_to_row(question, quiz_id, current.get("question_order") or 0)
        self.repo.update_question(question_id, row)

    def delete_question(self, quiz_id: int, question_id: int, user_id: str) -> None:
        self._load_owned_question(quiz_id, question_id, user_id)
        self.repo.delete_question(question_id)
        logger.info("Question %s deleted from quiz %s", question_id, quiz_id)

    # --- attempts ---

    def submit_attempt(self, quiz_id: int, user_id: str, answers: Any, time_spent: str) -> dict:
        quiz = self._load_quiz(quiz_id, user_id)
        result = score_submission(self.load_questions(quiz_id), answers)

        points = result.score * self.rules.points_per_correct
        exp = result.score * self.rules.exp_per_correct
        self.repo.add_attempt(
            {
                "quiz_id": quiz_id,
                "user_id": user_id,
                "score": result.score,
                "total_questions": result.total,
                "percentage": result.percentage,
                "time_spent": time_spent,
                "time_spent_seconds": time_spent_seconds(time_spent),
                "details": [d.to_dict() for d in result.details],
                "points_earned": points,
                "exp_earned": exp,
            }
        )
        self.repo.update_quiz_stats(
            quiz_id,
            quiz.total_attempts + 1,
            running_average(quiz.average_score, quiz.total_attempts, result.percentage),
        )
        logger.info("Attempt on quiz %s by %s: %d/%d", quiz_id, user_id, result.score, result.total)

        out = result.to_dict()
        out["pointsEarned"] = points
        out["expEarned"] = exp
        return out

    def _attempt_out(self, row: dict) -> dict:
        return {
            "id": row["id"],
            "userId": row["user_id"],
            "score": row["score"],
            "totalQuestions": row["total_questions"],
            "percentage": float(row.get("percentage") or 0),
            "timeSpent": row.get("time_spent") or "0:00",
            "pointsEarned": row.get("points_earned") or 0,
            "expEarned": row.get("exp_earned") or 0,
            "completedAt": to_iso(row.get("completed_at")),
        }

    def list_attempts(self, quiz_id: int, user_id: str) -> list[dict]:
        self._load_quiz(quiz_id, user_id)
        return [self._attempt_out(r) for r in self.repo.list_attempts(quiz_id, user_id)]

    def leaderboard(self, quiz_id: int, user_id: Optional[str]) -> list[dict]:
        self._load_quiz(quiz_id, user_id)
        rows = self.repo.leaderboard(quiz_id, self.rules.leaderboard_size)
        return [{"rank": i + 1, **self._attempt_out(r)} for i, r in enumerate(rows)]
