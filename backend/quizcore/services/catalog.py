from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from quizcore.models.quiz import Question, Quiz
from quizcore.models.user import User
from quizcore.services.contracts import QuizPublication, UserRoleInfo
from quizcore.services.questions import QuestionDef, question_from_row


class QuestionCatalog:
    """Read-only view of quizzes and questions for the attempt core."""

    def __init__(self, db: Session):
        self.db = db

    def get_questions_for_quiz(self, quiz_id: uuid.UUID) -> list[QuestionDef]:
        rows = self.db.scalars(
            select(Question).where(Question.quiz_id == quiz_id).order_by(Question.order_index)
        ).all()
        return [question_from_row(r) for r in rows]

    def get_question(self, question_id: uuid.UUID) -> QuestionDef | None:
        row = self.db.scalar(select(Question).where(Question.id == question_id))
        if row is None:
            return None
        return question_from_row(row)

    def get_quiz_publication_state(self, quiz_id: uuid.UUID) -> QuizPublication:
        is_published = self.db.scalar(select(Quiz.is_published).where(Quiz.id == quiz_id))
        if is_published is None:
            return QuizPublication(exists=False, is_published=False)
        return QuizPublication(exists=True, is_published=bool(is_published))


class UserDirectory:
    def __init__(self, db: Session):
        self.db = db

    def get_user_role(self, user_id: uuid.UUID) -> UserRoleInfo:
        role = self.db.scalar(select(User.role).where(User.id == user_id))
        if role is None:
            return UserRoleInfo(exists=False, role=None)
        return UserRoleInfo(exists=True, role=role)
