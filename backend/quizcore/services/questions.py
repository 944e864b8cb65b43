from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from quizcore.models.quiz import Question, QuestionType


@dataclass(frozen=True)
class MultipleChoiceQuestion:
    id: uuid.UUID
    quiz_id: uuid.UUID
    text: str
    points: Decimal
    order_index: int
    options: tuple[str, ...]
    expected_answer: str | None
    type: QuestionType = QuestionType.multiple_choice


@dataclass(frozen=True)
class TrueFalseQuestion:
    id: uuid.UUID
    quiz_id: uuid.UUID
    text: str
    points: Decimal
    order_index: int
    expected_answer: str | None
    type: QuestionType = QuestionType.true_false


@dataclass(frozen=True)
class ShortAnswerQuestion:
    id: uuid.UUID
    quiz_id: uuid.UUID
    text: str
    points: Decimal
    order_index: int
    expected_answer: str | None
    type: QuestionType = QuestionType.short_answer


@dataclass(frozen=True)
class EssayQuestion:
    id: uuid.UUID
    quiz_id: uuid.UUID
    text: str
    points: Decimal
    order_index: int
    type: QuestionType = QuestionType.essay


QuestionDef = Union[MultipleChoiceQuestion, TrueFalseQuestion, ShortAnswerQuestion, EssayQuestion]


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps the literal digits of floats coming back from drivers without native decimals.
    return Decimal(str(value))


def question_from_row(row: Question) -> QuestionDef:
    """Convert a stored question into the variant matching its type.

    Fields that are meaningless for a type are dropped here, so downstream code
    never has to guess whether a null column means "not applicable" or "missing".
    """
    common = {
        "id": row.id,
        "quiz_id": row.quiz_id,
        "text": row.question_text or "",
        "points": _as_decimal(row.points),
        "order_index": int(row.order_index),
    }
    qtype = QuestionType(row.type)

    if qtype == QuestionType.multiple_choice:
        return MultipleChoiceQuestion(
            options=tuple(str(o) for o in (row.options or [])),
            expected_answer=row.expected_answer,
            **common,
        )
    if qtype == QuestionType.true_false:
        return TrueFalseQuestion(expected_answer=row.expected_answer, **common)
    if qtype == QuestionType.short_answer:
        return ShortAnswerQuestion(expected_answer=row.expected_answer, **common)
    return EssayQuestion(**common)
