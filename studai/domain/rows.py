"""Mapping between stored rows and the domain model."""

import logging
from typing import Any, Mapping, Optional

from ..services.typing import parse_json_field
from .model import (
    FillInBlankQuestion,
    MatchingPair,
    MatchingQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    Quiz,
    TrueFalseQuestion,
    UnsupportedQuestion,
)

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _pairs(value: Any) -> Optional[tuple[MatchingPair, ...]]:
    value = parse_json_field(value)
    if not isinstance(value, list):
        return None
    pairs = []
    for item in value:
        if not isinstance(item, Mapping) or "left" not in item or "right" not in item:
            return None
        pairs.append(MatchingPair(left=str(item["left"]), right=str(item["right"])))
    return tuple(pairs)


def question_from_row(row: Mapping[str, Any]) -> Question:
    qid = row["id"]
    prompt = row.get("question") or ""
    raw_type = row.get("type")

    try:
        qtype = QuestionType(raw_type)
    except ValueError:
        logger.warning("Question %s has unsupported type %r", qid, raw_type)
        return UnsupportedQuestion(id=qid, prompt=prompt, type_name=str(raw_type))

    if qtype is QuestionType.MULTIPLE_CHOICE:
        choices = parse_json_field(row.get("choices"))
        if not isinstance(choices, list):
            choices = []
        question: Question = MultipleChoiceQuestion(
            id=qid,
            prompt=prompt,
            choices=tuple(str(c) for c in choices),
            answer=_text(row.get("correct_answer")),
        )
    elif qtype is QuestionType.TRUE_FALSE:
        question = TrueFalseQuestion(id=qid, prompt=prompt, answer=_text(row.get("correct_answer")))
    elif qtype is QuestionType.FILL_IN_BLANK:
        question = FillInBlankQuestion(id=qid, prompt=prompt, answer=_text(row.get("answer")))
    else:
        question = MatchingQuestion(id=qid, prompt=prompt, pairs=_pairs(row.get("matching_pairs")))

    if getattr(question, "answer", None) is None and getattr(question, "pairs", None) is None:
        logger.warning("Question %s (%s) has no answer key", qid, qtype.value)
    return question


def question_to_row(question: Mapping[str, Any], quiz_id: int, position: int) -> dict:
    """Build an insertable row from a validated ``QuestionIn`` dump."""
    qtype = QuestionType(question["type"])
    row: dict[str, Any] = {
        "quiz_id": quiz_id,
        "type": qtype.value,
        "question": question["prompt"],
        "question_order": position,
        "choices": None,
        "correct_answer": None,
        "answer": None,
        "matching_pairs": None,
    }
    if qtype is QuestionType.MULTIPLE_CHOICE:
        row["choices"] = list(question["choices"])
        row["correct_answer"] = question["answer"]
    elif qtype is QuestionType.TRUE_FALSE:
        row["correct_answer"] = question["answer"]
    elif qtype is QuestionType.FILL_IN_BLANK:
        row["answer"] = question["answer"]
    else:
        row["matching_pairs"] = [{"left": p["left"], "right": p["right"]} for p in question["pairs"]]
    return row


def quiz_from_row(row: Mapping[str, Any]) -> Quiz:
    return Quiz(
        id=row["id"],
        title=row["title"],
        description=row.get("description") or "",
        is_public=bool(row.get("is_public", True)),
        created_by=row.get("created_by"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        total_attempts=int(row.get("total_attempts") or 0),
        average_score=float(row.get("average_score") or 0),
    )
