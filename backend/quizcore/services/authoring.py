from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from quizcore.core.errors import ConflictError, NotFoundError, PreconditionError
from quizcore.models.quiz import Question, QuestionType, Quiz
from quizcore.models.user import User, UserRole

log = logging.getLogger(__name__)

_QUIZ_UPDATABLE = ("title", "description", "is_published")


class AuthoringService:
    """Plain storage for users, quizzes and questions."""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, *, email: str, name: str, role: UserRole) -> User:
        email = email.strip()
        existing = self.db.scalar(select(User.id).where(User.email == email))
        if existing is not None:
            raise ConflictError("email already registered")

        user = User(email=email, name=name, role=role, created_at=datetime.now(timezone.utc))
        self.db.add(user)
        self.db.commit()
        log.info("user created user_id=%s role=%s", user.id, role.value)
        return user

    def list_users(self) -> list[User]:
        return list(self.db.scalars(select(User).order_by(User.created_at, User.email)))

    def create_quiz(self, *, title: str, description: str | None, teacher_id: uuid.UUID) -> Quiz:
        teacher = self.db.scalar(select(User).where(User.id == teacher_id))
        if teacher is None:
            raise NotFoundError("teacher not found")
        if teacher.role != UserRole.teacher:
            raise PreconditionError("user is not a teacher")

        now = datetime.now(timezone.utc)
        quiz = Quiz(
            title=title,
            description=description,
            teacher_id=teacher_id,
            is_published=False,
            created_at=now,
            updated_at=now,
        )
        self.db.add(quiz)
        self.db.commit()
        log.info("quiz created quiz_id=%s teacher_id=%s", quiz.id, teacher_id)
        return quiz

    def get_quiz(self, quiz_id: uuid.UUID) -> Quiz | None:
        return self.db.scalar(select(Quiz).where(Quiz.id == quiz_id))

    def list_quizzes(self) -> list[Quiz]:
        return list(self.db.scalars(select(Quiz).order_by(Quiz.created_at)))

    def update_quiz(self, quiz_id: uuid.UUID, *, changes: dict[str, Any]) -> Quiz:
        """Apply only the fields present in ``changes``; an explicit None clears the description."""
        quiz = self.get_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError("quiz not found")

        for field in _QUIZ_UPDATABLE:
            if field in changes:
                setattr(quiz, field, changes[field])
        quiz.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        return quiz

    def create_question(
        self,
        *,
        quiz_id: uuid.UUID,
        type: QuestionType,
        question_text: str,
        points: Decimal,
        order_index: int,
        options: list[str] | None = None,
        expected_answer: str | None = None,
    ) -> Question:
        quiz_exists = self.db.scalar(select(Quiz.id).where(Quiz.id == quiz_id))
        if quiz_exists is None:
            raise NotFoundError("quiz not found")

        taken = self.db.scalar(
            select(Question.id).where(Question.quiz_id == quiz_id, Question.order_index == order_index)
        )
        if taken is not None:
            raise ConflictError("order_index already used in this quiz")

        question = Question(
            quiz_id=quiz_id,
            type=type,
            question_text=question_text,
            options=list(options) if type == QuestionType.multiple_choice and options else None,
            expected_answer=None if type == QuestionType.essay else expected_answer,
            points=points,
            order_index=order_index,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(question)
        self.db.commit()
        return question

    def list_questions(self, quiz_id: uuid.UUID) -> list[Question]:
        return list(
            self.db.scalars(select(Question).where(Question.quiz_id == quiz_id).order_by(Question.order_index))
        )
