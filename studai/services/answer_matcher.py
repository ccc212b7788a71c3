"""Server-side answer checking.

Each question variant has its own comparison rule:

* Multiple Choice and True/False compare the raw strings exactly, so case
  matters.
* Fill in the blanks trims and lower-cases both sides.
* Matching accepts the pairs in any order, but every stored pair must be
  present and nothing else may be submitted. Each side of a pair is
  trimmed and lower-cased like a fill-in answer.

Anything the matcher cannot make sense of (unknown type, missing answer
key, wrong answer shape) is simply an incorrect answer. ``is_correct``
never raises.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from ..domain.model import (
    FillInBlankQuestion,
    MatchingPair,
    MatchingQuestion,
    MultipleChoiceQuestion,
    Question,
    TrueFalseQuestion,
)


def _exact(expected: Optional[str], submitted: Any) -> bool:
    if expected is None or not isinstance(submitted, str):
        return False
    return submitted == expected


def _fold(value: str) -> str:
    return value.strip().lower()


def _normalized(expected: Optional[str], submitted: Any) -> bool:
    if expected is None or not isinstance(submitted, str):
        return False
    return _fold(submitted) == _fold(expected)


def _as_pair(item: Any) -> Optional[MatchingPair]:
    if isinstance(item, Mapping):
        left, right = item.get("left"), item.get("right")
    else:
        left, right = getattr(item, "left", None), getattr(item, "right", None)
    if not isinstance(left, str) or not isinstance(right, str):
        return None
    return MatchingPair(left=_fold(left), right=_fold(right))


def _matching(expected: Optional[tuple[MatchingPair, ...]], submitted: Any) -> bool:
    if expected is None:
        return False
    if isinstance(submitted, (str, bytes)) or not isinstance(submitted, Sequence):
        return False
    if len(submitted) != len(expected):
        return False

    given = set()
    for item in submitted:
        pair = _as_pair(item)
        if pair is None:
            return False
        given.add(pair)
    return all(MatchingPair(_fold(p.left), _fold(p.right)) in given for p in expected)


def is_correct(question: Question, submitted_answer: Any) -> bool:
    if submitted_answer is None:
        return False
    if isinstance(question, (MultipleChoiceQuestion, TrueFalseQuestion)):
        return _exact(question.answer, submitted_answer)
    if isinstance(question, FillInBlankQuestion):
        return _normalized(question.answer, submitted_answer)
    if isinstance(question, MatchingQuestion):
        return _matching(question.pairs, submitted_answer)
    # UnsupportedQuestion or anything else
    return False
