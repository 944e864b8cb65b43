import uuid
from decimal import Decimal

import pytest

from quizcore.models.attempt import AnswerVerdict
from quizcore.services.evaluator import evaluate
from quizcore.services.questions import (
    EssayQuestion,
    MultipleChoiceQuestion,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)


def _short(expected: str | None = "Paris", points: str = "10") -> ShortAnswerQuestion:
    return ShortAnswerQuestion(
        id=uuid.uuid4(),
        quiz_id=uuid.uuid4(),
        text="Capital of France?",
        points=Decimal(points),
        order_index=0,
        expected_answer=expected,
    )


def _essay() -> EssayQuestion:
    return EssayQuestion(
        id=uuid.uuid4(),
        quiz_id=uuid.uuid4(),
        text="Describe the water cycle.",
        points=Decimal("20"),
        order_index=1,
    )


def test_match_ignores_case_and_surrounding_whitespace():
    result = evaluate(_short(), "  paris  ")
    assert result.verdict == AnswerVerdict.correct
    assert result.is_correct is True
    assert result.points_earned == Decimal("10")


def test_internal_whitespace_is_significant():
    result = evaluate(_short(), "par is")
    assert result.verdict == AnswerVerdict.incorrect
    assert result.is_correct is False
    assert result.points_earned == Decimal("0")

    assert evaluate(_short("New York"), "New  York").is_correct is False
    assert evaluate(_short("New York"), "new york").is_correct is True


def test_empty_answer_is_incorrect():
    result = evaluate(_short(), "")
    assert result.verdict == AnswerVerdict.incorrect
    assert result.points_earned == Decimal("0")


def test_missing_expected_answer_is_not_evaluated():
    result = evaluate(_short(expected=None), "Paris")
    assert result.verdict == AnswerVerdict.not_evaluated
    assert result.is_correct is None
    assert result.points_earned is None


@pytest.mark.parametrize("answer_text", ["", "anything", "Paris"])
def test_essay_is_never_evaluated(answer_text):
    result = evaluate(_essay(), answer_text)
    assert result.verdict == AnswerVerdict.not_evaluated
    assert result.is_correct is None
    assert result.points_earned is None


def test_multiple_choice_and_true_false_use_the_same_rule():
    mc = MultipleChoiceQuestion(
        id=uuid.uuid4(),
        quiz_id=uuid.uuid4(),
        text="Pick one",
        points=Decimal("2.5"),
        order_index=0,
        options=("Red", "Green", "Blue"),
        expected_answer="Green",
    )
    tf = TrueFalseQuestion(
        id=uuid.uuid4(),
        quiz_id=uuid.uuid4(),
        text="The sky is blue",
        points=Decimal("1"),
        order_index=1,
        expected_answer="true",
    )

    assert evaluate(mc, "green").points_earned == Decimal("2.5")
    assert evaluate(mc, "Blue").points_earned == Decimal("0")
    assert evaluate(tf, "TRUE ").is_correct is True
    assert evaluate(tf, "false").is_correct is False


def test_fractional_points_are_preserved_exactly():
    result = evaluate(_short(points="10.5"), "Paris")
    assert result.points_earned == Decimal("10.5")
    assert isinstance(result.points_earned, Decimal)


def test_evaluation_is_deterministic():
    q = _short()
    for text in ["Paris", " PARIS", "Lyon", ""]:
        assert evaluate(q, text) == evaluate(q, text)
