from studai.core.config import Settings
from studai.domain.model import QuizRules


def test_origins_from_comma_or_semicolon_list():
    s = Settings(FRONTEND_ORIGINS="http://a.test, http://b.test;http://c.test")
    assert s.FRONTEND_ORIGINS == ["http://a.test", "http://b.test", "http://c.test"]


def test_origins_from_json_list():
    s = Settings(FRONTEND_ORIGINS='["http://a.test"]')
    assert s.FRONTEND_ORIGINS == ["http://a.test"]


def test_quiz_rules_resolved_once():
    s = Settings(QUIZ_POINTS_PER_CORRECT=3, QUIZ_LEADERBOARD_SIZE=5)
    assert s.quiz_rules() == QuizRules(points_per_correct=3, exp_per_correct=5, max_questions=50, leaderboard_size=5)
