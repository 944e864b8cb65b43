from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from quizcore.models.attempt import AnswerVerdict
from quizcore.services.questions import EssayQuestion, QuestionDef


@dataclass(frozen=True)
class Evaluation:
    verdict: AnswerVerdict
    points_earned: Decimal | None

    @property
    def is_correct(self) -> bool | None:
        if self.verdict == AnswerVerdict.not_evaluated:
            return None
        return self.verdict == AnswerVerdict.correct


NOT_EVALUATED = Evaluation(verdict=AnswerVerdict.not_evaluated, points_earned=None)


def _normalize(text: str) -> str:
    # Only the ends are trimmed: "New York" and "New  York" stay different.
    return (text or "").strip().lower()


def evaluate(question: QuestionDef, answer_text: str) -> Evaluation:
    """Grade one submitted answer against its question.

    Objective questions are graded by case-insensitive exact match. Essays, and
    objective questions stored without an expected answer, are left for manual
    grading and come back as ``not_evaluated``.
    """
    if isinstance(question, EssayQuestion):
        return NOT_EVALUATED

    expected = question.expected_answer
    if expected is None:
        return NOT_EVALUATED

    if _normalize(answer_text) == _normalize(expected):
        return Evaluation(verdict=AnswerVerdict.correct, points_earned=question.points)
    return Evaluation(verdict=AnswerVerdict.incorrect, points_earned=Decimal("0"))
