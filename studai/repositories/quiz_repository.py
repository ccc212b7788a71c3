from typing import List, Optional
from supabase import Client

from ..domain.rows import question_to_row


class QuizRepository:
    def __init__(self, client: Client) -> None:
        self.client = client

    def list_public_quizzes(self) -> List[dict]:
        res = (
            self.client.table("quizzes")
            .select("id,title,description,created_by,updated_at")
            .eq("is_public", True)
            .order("updated_at", desc=True)
            .execute()
        )
        return res.data or []

    def get_quiz(self, quiz_id: int) -> Optional[dict]:
        res = self.client.table("quizzes").select("*").eq("id", quiz_id).limit(1).execute()
        return res.data[0] if res.data else None

    def list_questions(self, quiz_id: int) -> List[dict]:
        res = (
            self.client.table("questions")
            .select("*")
            .eq("quiz_id", quiz_id)
            .order("question_order", desc=False)
            .execute()
        )
        return res.data or []

    def create_quiz(
        self,
        title: str,
        description: str,
        is_public: bool,
        created_by: str,
        questions: List[dict],
    ) -> int:
        # no .select()/.single() after insert, v2 returns the rows in data
        quiz_ins = (
            self.client.table("quizzes")
            .insert(
                {
                    "title": title,
                    "description": description,
                    "is_public": is_public,
                    "created_by": created_by,
                    "total_attempts": 0,
                    "average_score": 0,
                }
            )
            .execute()
        )
        if not quiz_ins.data or not isinstance(quiz_ins.data, list) or "id" not in quiz_ins.data[0]:
            raise RuntimeError("Insert quizzes failed: no returned id")

        quiz_id = quiz_ins.data[0]["id"]
        self._insert_questions(quiz_id, questions)
        return quiz_id

    def update_quiz(self, quiz_id: int, fields: dict, questions: Optional[List[dict]]) -> None:
        if fields:
            self.client.table("quizzes").update(fields).eq("id", quiz_id).execute()

        if questions is not None:
            # Replace the whole question list, positions follow the new order
            self.client.table("questions").delete().eq("quiz_id", quiz_id).execute()
            self._insert_questions(quiz_id, questions)

    def delete_quiz(self, quiz_id: int) -> None:
        # children first, quiz_attempts and questions both reference quizzes
        self.client.table("quiz_attempts").delete().eq("quiz_id", quiz_id).execute()
        self.client.table("questions").delete().eq("quiz_id", quiz_id).execute()
        self.client.table("quizzes").delete().eq("id", quiz_id).execute()

    def update_quiz_stats(self, quiz_id: int, total_attempts: int, average_score: float) -> None:
        (
            self.client.table("quizzes")
            .update({"total_attempts": total_attempts, "average_score": average_score})
            .eq("id", quiz_id)
            .execute()
        )

    # --- single questions ---

    def get_question(self, quiz_id: int, question_id: int) -> Optional[dict]:
        res = (
            self.client.table("questions")
            .select("*")
            .eq("id", question_id)
            .eq("quiz_id", quiz_id)
            .limit(1)
            .execute()
        )
        return res.data[0] if res.data else None

    def add_question(self, row: dict) -> int:
        res = self.client.table("questions").insert(row).execute()
        if not res.data or "id" not in res.data[0]:
            raise RuntimeError("Insert questions failed: no returned id")
        return res.data[0]["id"]

    def update_question(self, question_id: int, row: dict) -> None:
        self.client.table("questions").update(row).eq("id", question_id).execute()

    def delete_question(self, question_id: int) -> None:
        self.client.table("questions").delete().eq("id", question_id).execute()

    def _insert_questions(self, quiz_id: int, questions: List[dict]) -> None:
        rows = [question_to_row(q, quiz_id, idx) for idx, q in enumerate(questions)]
        if rows:
            self.client.table("questions").insert(rows).execute()

    def add_attempt(self, attempt: dict) -> dict:
        res = self.client.table("quiz_attempts").insert(attempt).execute()
        if not res.data:
            raise RuntimeError("Insert quiz_attempts failed: nothing returned")
        return res.data[0]

    def list_attempts(self, quiz_id: int, user_id: str) -> List[dict]:
        res = (
            self.client.table("quiz_attempts")
            .select("*")
            .eq("quiz_id", quiz_id)
            .eq("user_id", user_id)
            .order("completed_at", desc=True)
            .execute()
        )
        return res.data or []

    def leaderboard(self, quiz_id: int, limit: int) -> List[dict]:
        res = (
            self.client.table("quiz_attempts")
            .select("*")
            .eq("quiz_id", quiz_id)
            .order("score", desc=True)
            .order("time_spent_seconds", desc=False)
            .limit(limit)
            .execute()
        )
        return res.data or []
