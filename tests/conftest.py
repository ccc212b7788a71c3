import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from studai.api.v1.routers.quizzes import get_service
from studai.domain.model import QuizRules
from studai.domain.rows import question_to_row
from studai.main import app
from studai.schemas.quiz_schemas import QuestionIn
from studai.services.quiz_service import QuizService


class FakeQuizRepository:
    """Keeps the three tables in memory, same row shapes as Supabase."""

    def __init__(self) -> None:
        self.quizzes: dict[int, dict] = {}
        self.questions: list[dict] = []
        self.attempts: list[dict] = []
        self._ids = 0

    def _next_id(self) -> int:
        self._ids += 1
        return self._ids

    def list_public_quizzes(self):
        rows = [q for q in self.quizzes.values() if q["is_public"]]
        return sorted(rows, key=lambda q: q["updated_at"], reverse=True)

    def get_quiz(self, quiz_id):
        return self.quizzes.get(quiz_id)

    def list_questions(self, quiz_id):
        rows = [q for q in self.questions if q["quiz_id"] == quiz_id]
        return sorted(rows, key=lambda q: q["question_order"])

    def add_question_row(self, row: dict) -> dict:
        row = {"id": self._next_id(), **row}
        self.questions.append(row)
        return row

    def create_quiz(self, title, description, is_public, created_by, questions):
        quiz_id = self._next_id()
        now = datetime.now(timezone.utc)
        self.quizzes[quiz_id] = {
            "id": quiz_id,
            "title": title,
            "description": description,
            "is_public": is_public,
            "created_by": created_by,
            "created_at": now,
            "updated_at": now,
            "total_attempts": 0,
            "average_score": 0,
        }
        for idx, q in enumerate(questions):
            self.add_question_row(question_to_row(q, quiz_id, idx))
        return quiz_id

    def update_quiz(self, quiz_id, fields, questions):
        self.quizzes[quiz_id].update(fields)
        if questions is not None:
            self.questions = [q for q in self.questions if q["quiz_id"] != quiz_id]
            for idx, q in enumerate(questions):
                self.add_question_row(question_to_row(q, quiz_id, idx))

    def delete_quiz(self, quiz_id):
        self.attempts = [a for a in self.attempts if a["quiz_id"] != quiz_id]
        self.questions = [q for q in self.questions if q["quiz_id"] != quiz_id]
        del self.quizzes[quiz_id]

    def update_quiz_stats(self, quiz_id, total_attempts, average_score):
        self.quizzes[quiz_id].update({"total_attempts": total_attempts, "average_score": average_score})

    def get_question(self, quiz_id, question_id):
        for q in self.questions:
            if q["id"] == question_id and q["quiz_id"] == quiz_id:
                return q
        return None

    def add_question(self, row):
        return self.add_question_row(row)["id"]

    def update_question(self, question_id, row):
        for q in self.questions:
            if q["id"] == question_id:
                q.update(row)

    def delete_question(self, question_id):
        self.questions = [q for q in self.questions if q["id"] != question_id]

    def add_attempt(self, attempt):
        row = {"id": self._next_id(), "completed_at": datetime.now(timezone.utc), **attempt}
        self.attempts.append(row)
        return row

    def list_attempts(self, quiz_id, user_id):
        rows = [a for a in self.attempts if a["quiz_id"] == quiz_id and a["user_id"] == user_id]
        return sorted(rows, key=lambda a: a["id"], reverse=True)

    def leaderboard(self, quiz_id, limit):
        rows = [a for a in self.attempts if a["quiz_id"] == quiz_id]
        rows.sort(key=lambda a: (-a["score"], a["time_spent_seconds"]))
        return rows[:limit]


GEOGRAPHY_QUESTIONS = [
    {
        "type": "Multiple Choice",
        "prompt": "Capital of France?",
        "choices": ["Paris", "Rome", "Madrid"],
        "answer": "Paris",
    },
    {"type": "Fill in the blanks", "prompt": "We breathe ___.", "answer": "Oxygen"},
    {"type": "True/False", "prompt": "Rome is in Italy.", "answer": "True"},
    {
        "type": "Matching",
        "prompt": "Match countries to capitals",
        "pairs": [{"left": "France", "right": "Paris"}, {"left": "Italy", "right": "Rome"}],
    },
]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def repo():
    return FakeQuizRepository()


@pytest.fixture
def rules():
    return QuizRules(points_per_correct=10, exp_per_correct=5, max_questions=5, leaderboard_size=2)


@pytest.fixture
def client(repo, rules):
    app.dependency_overrides[get_service] = lambda: QuizService(repo, rules)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def quiz_id(repo):
    questions = [QuestionIn(**q).model_dump() for q in GEOGRAPHY_QUESTIONS]
    return repo.create_quiz("Geography", "Capitals and air", True, "alice", questions)
