from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from quizcore.models.attempt import QuizAttempt, QuizAttemptAnswer
from quizcore.models.user import UserRole
from quizcore.services.evaluator import Evaluation
from quizcore.services.questions import QuestionDef


@dataclass(frozen=True)
class QuizPublication:
    exists: bool
    is_published: bool


@dataclass(frozen=True)
class UserRoleInfo:
    exists: bool
    role: UserRole | None


class QuestionCatalogContract(Protocol):
    def get_questions_for_quiz(self, quiz_id: uuid.UUID) -> list[QuestionDef]: ...

    def get_question(self, question_id: uuid.UUID) -> QuestionDef | None: ...

    def get_quiz_publication_state(self, quiz_id: uuid.UUID) -> QuizPublication: ...


class UserDirectoryContract(Protocol):
    def get_user_role(self, user_id: uuid.UUID) -> UserRoleInfo: ...


class AttemptRepositoryContract(Protocol):
    def create_attempt(self, *, quiz_id: uuid.UUID, student_id: uuid.UUID, max_score: Decimal) -> QuizAttempt: ...

    def get_attempt(self, attempt_id: uuid.UUID) -> QuizAttempt | None: ...

    def lock_attempt(self, attempt_id: uuid.UUID) -> QuizAttempt | None: ...

    def upsert_answer(
        self,
        *,
        attempt_id: uuid.UUID,
        question_id: uuid.UUID,
        answer_text: str,
        evaluation: Evaluation,
    ) -> QuizAttemptAnswer: ...

    def list_answers(self, attempt_id: uuid.UUID) -> list[QuizAttemptAnswer]: ...

    def mark_completed(self, attempt_id: uuid.UUID, *, total_score: Decimal, completed_at: datetime) -> bool: ...

    def list_attempts_for_student(self, student_id: uuid.UUID) -> list[QuizAttempt]: ...

    def refresh(self, attempt: QuizAttempt) -> QuizAttempt: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
