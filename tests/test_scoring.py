import json

import pytest

from studai.core.errors import InvalidSubmissionError
from studai.domain.model import (
    FillInBlankQuestion,
    MatchingPair,
    MatchingQuestion,
    MultipleChoiceQuestion,
    TrueFalseQuestion,
    UnsupportedQuestion,
)
from studai.services.scoring import SubmissionEntry, parse_submission, score_submission

QUESTIONS = [
    MultipleChoiceQuestion(id=1, prompt="Capital of France?", choices=("Paris", "Rome"), answer="Paris"),
    TrueFalseQuestion(id=2, prompt="The sun is cold.", answer="False"),
    FillInBlankQuestion(id=3, prompt="We breathe ___.", answer="Oxygen"),
]


def test_one_correct_one_wrong_one_unanswered():
    submission = [
        {"questionId": 1, "answer": "Paris"},
        {"questionId": 2, "answer": "True"},
    ]
    result = score_submission(QUESTIONS, submission)

    assert (result.score, result.total) == (1, 3)
    assert result.to_dict()["details"] == [
        {"questionId": 1, "isCorrect": True},
        {"questionId": 2, "isCorrect": False},
        {"questionId": 3, "isCorrect": False},
    ]
    body = json.dumps(result.to_dict())
    for secret in ("Paris", "False", "Oxygen"):
        assert secret not in body


def test_lookup_does_not_depend_on_submission_order():
    submission = [
        {"questionId": 1, "answer": "Paris"},
        {"questionId": 2, "answer": "False"},
        {"questionId": 3, "answer": "nitrogen"},
    ]
    forward = score_submission(QUESTIONS, submission)
    backward = score_submission(QUESTIONS, list(reversed(submission)))

    assert (forward.score, forward.total) == (backward.score, backward.total) == (2, 3)


def test_unknown_ids_ignored_and_first_duplicate_wins():
    submission = [
        {"questionId": 99, "answer": "Paris"},
        {"questionId": 1, "answer": "Rome"},
        {"questionId": 1, "answer": "Paris"},
    ]
    result = score_submission(QUESTIONS, submission)
    assert result.score == 0
    assert [d.question_id for d in result.details] == [1, 2, 3]


def test_snake_case_ids_and_string_ids_accepted():
    result = score_submission(QUESTIONS, [{"question_id": "3", "answer": " OXYGEN "}])
    assert result.score == 1


def test_matching_and_unsupported_questions():
    questions = [
        MatchingQuestion(id=10, prompt="Match", pairs=(MatchingPair("France", "Paris"), MatchingPair("Italy", "Rome"))),
        UnsupportedQuestion(id=11, prompt="Write an essay", type_name="Essay"),
    ]
    submission = [
        {"questionId": 10, "answer": [{"left": "Italy", "right": "Rome"}, {"left": "France", "right": "Paris"}]},
        {"questionId": 11, "answer": "my essay"},
    ]
    result = score_submission(questions, submission)
    assert (result.score, result.total) == (1, 2)


def test_empty_quiz():
    result = score_submission([], [])
    assert (result.score, result.total, result.percentage) == (0, 0, 0.0)


def test_percentage():
    result = score_submission(QUESTIONS, [{"questionId": 1, "answer": "Paris"}])
    assert result.percentage == 33.33


def test_parsed_entries_are_accepted():
    entries = parse_submission([{"questionId": 1, "answer": "Paris"}])
    assert entries == [SubmissionEntry(questionId=1, answer="Paris")]
    assert score_submission(QUESTIONS, entries).score == 1


@pytest.mark.parametrize(
    "submission",
    [
        None,
        "Paris",
        {"questionId": 1, "answer": "Paris"},
        [{"answer": "Paris"}],
        ["Paris"],
        [{"questionId": "one"}],
        [{"questionId": True, "answer": "Paris"}],
    ],
)
def test_malformed_submission_is_rejected(submission):
    with pytest.raises(InvalidSubmissionError):
        score_submission(QUESTIONS, submission)


def test_questions_must_be_a_list():
    with pytest.raises(TypeError):
        score_submission({"questions": QUESTIONS}, [])
