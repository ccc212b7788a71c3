"""Keep answers on the server.

``sanitize_questions`` turns questions into the payload a client gets
before it has answered them. ``sanitize_data`` is the blunt instrument
applied to every quiz response on top of that: it drops well-known
secret or answer fields wherever they appear.
"""

import random
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence

from ..domain.model import (
    MatchingQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
)
from .typing import parse_json_field

SENSITIVE_FIELDS = frozenset(
    {
        "password",
        "password_hash",
        "reset_token",
        "reset_token_expiry",
        "verification_token",
        "correct_answer",
        "correctAnswer",
        "answer",
        "matching_pairs",
        "matchingPairs",
        "pairs",
        "api_key",
        "secret",
        "private_key",
        "access_token",
        "refresh_token",
    }
)


def _shuffled(items: Iterable[str], rng: random.Random) -> list[str]:
    out = list(items)
    rng.shuffle(out)
    return out


def _type_name(value: Any) -> Any:
    return value.value if isinstance(value, QuestionType) else value


def _sanitize_question(question: Question, rng: random.Random) -> dict:
    safe = {"id": question.id, "type": _type_name(question.type), "prompt": question.prompt}
    if isinstance(question, MultipleChoiceQuestion):
        safe["choices"] = list(question.choices)
    elif isinstance(question, MatchingQuestion):
        pairs = question.pairs or ()
        safe["leftItems"] = _shuffled((p.left for p in pairs), rng)
        safe["rightItems"] = _shuffled((p.right for p in pairs), rng)
    return safe


def _sanitize_payload(payload: Mapping[str, Any], rng: random.Random) -> dict:
    qtype = _type_name(payload.get("type"))
    safe = {
        "id": payload.get("id"),
        "type": qtype,
        "prompt": payload.get("prompt", payload.get("question")),
    }
    if qtype == QuestionType.MULTIPLE_CHOICE.value:
        choices = parse_json_field(payload.get("choices"))
        safe["choices"] = list(choices) if isinstance(choices, list) else []
    elif qtype == QuestionType.MATCHING.value:
        pairs = parse_json_field(payload.get("matching_pairs", payload.get("pairs")))
        if isinstance(pairs, list):
            pairs = [p for p in pairs if isinstance(p, Mapping)]
            left = [p.get("left") for p in pairs]
            right = [p.get("right") for p in pairs]
        else:
            left = payload.get("leftItems") or []
            right = payload.get("rightItems") or []
        safe["leftItems"] = _shuffled(left, rng)
        safe["rightItems"] = _shuffled(right, rng)
    return safe


def sanitize_questions(
    questions: Sequence[Question | Mapping[str, Any]],
    rng: Optional[random.Random] = None,
) -> list[dict]:
    """Return client-safe copies of ``questions``.

    Accepts domain questions as well as plain mappings (stored rows or an
    earlier sanitized payload). The answer key is left out of the result
    entirely, and matching questions expose their left and right labels as
    two independently shuffled lists. The input is never modified.
    """
    if not isinstance(questions, (list, tuple)):
        raise TypeError(f"questions must be a list, got {type(questions).__name__}")
    rng = rng or random.Random()

    out = []
    for q in questions:
        if isinstance(q, Mapping):
            out.append(_sanitize_payload(q, rng))
        else:
            out.append(_sanitize_question(q, rng))
    return out


def sanitize_data(data: Any, exclude_fields: Iterable[str] = ()) -> Any:
    """Recursively copy ``data`` without any sensitive keys."""
    blocked = SENSITIVE_FIELDS.union(exclude_fields)
    return _strip(data, blocked)


def _strip(data: Any, blocked: frozenset) -> Any:
    if isinstance(data, Mapping):
        return {k: _strip(v, blocked) for k, v in data.items() if k not in blocked}
    if isinstance(data, (list, tuple)):
        return [_strip(v, blocked) for v in data]
    return data
