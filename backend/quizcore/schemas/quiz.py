from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from quizcore.models.quiz import QuestionType
from quizcore.schemas.common import Score


class QuizCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str | None = None
    teacher_id: str


class QuizUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None
    is_published: bool | None = None

    @model_validator(mode="after")
    def _no_null_title(self) -> "QuizUpdateRequest":
        if "title" in self.model_fields_set and self.title is None:
            raise ValueError("title cannot be null")
        if "is_published" in self.model_fields_set and self.is_published is None:
            raise ValueError("is_published cannot be null")
        return self


class QuizResponse(BaseModel):
    id: str
    title: str
    description: str | None
    teacher_id: str
    is_published: bool
    created_at: datetime
    updated_at: datetime


class QuestionCreateRequest(BaseModel):
    type: QuestionType
    question_text: str = Field(min_length=1)
    options: list[str] | None = None
    expected_answer: str | None = None
    points: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    order_index: int = Field(ge=0)

    @model_validator(mode="after")
    def _options_for_multiple_choice(self) -> "QuestionCreateRequest":
        if self.type == QuestionType.multiple_choice and not self.options:
            raise ValueError("multiple_choice questions require at least one option")
        return self


class QuestionResponse(BaseModel):
    id: str
    quiz_id: str
    type: str
    question_text: str
    options: list[str] | None
    expected_answer: str | None
    points: Score
    order_index: int
    created_at: datetime
