from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from quizcore.core.errors import ConflictError, NotFoundError, PreconditionError
from quizcore.models.attempt import QuizAttempt, QuizAttemptAnswer
from quizcore.models.user import UserRole
from quizcore.services.attempt_repository import AttemptRepository
from quizcore.services.catalog import QuestionCatalog, UserDirectory
from quizcore.services.contracts import (
    AttemptRepositoryContract,
    QuestionCatalogContract,
    UserDirectoryContract,
)
from quizcore.services.evaluator import evaluate
from quizcore.services.scoring import aggregate

log = logging.getLogger(__name__)


class AttemptLedger:
    """Lifecycle of quiz attempts: start, record answers, complete.

    An attempt is either in progress (``completed_at`` is null) or completed.
    Completion is terminal; every mutating call commits once on success and
    rolls back on any error.
    """

    def __init__(
        self,
        *,
        catalog: QuestionCatalogContract,
        users: UserDirectoryContract,
        repository: AttemptRepositoryContract,
    ):
        self.catalog = catalog
        self.users = users
        self.repository = repository

    @classmethod
    def for_session(cls, db: Session) -> "AttemptLedger":
        return cls(catalog=QuestionCatalog(db), users=UserDirectory(db), repository=AttemptRepository(db))

    def start_attempt(self, *, quiz_id: uuid.UUID, student_id: uuid.UUID) -> QuizAttempt:
        try:
            publication = self.catalog.get_quiz_publication_state(quiz_id)
            if not publication.exists:
                raise NotFoundError("quiz not found")
            if not publication.is_published:
                raise PreconditionError("quiz is not published")

            user = self.users.get_user_role(student_id)
            if not user.exists:
                raise NotFoundError("student not found")
            if user.role != UserRole.student:
                raise PreconditionError("user is not a student")

            questions = self.catalog.get_questions_for_quiz(quiz_id)
            max_score = sum((q.points for q in questions), Decimal("0"))

            attempt = self.repository.create_attempt(quiz_id=quiz_id, student_id=student_id, max_score=max_score)
            attempt_id = attempt.id
            self.repository.commit()
        except Exception:
            self.repository.rollback()
            raise

        log.info(
            "attempt started attempt_id=%s quiz_id=%s student_id=%s max_score=%s questions=%s",
            attempt_id,
            quiz_id,
            student_id,
            max_score,
            len(questions),
        )
        return attempt

    def submit_answer(self, *, attempt_id: uuid.UUID, question_id: uuid.UUID, answer_text: str) -> QuizAttemptAnswer:
        try:
            attempt = self.repository.lock_attempt(attempt_id)
            if attempt is None:
                raise NotFoundError("attempt not found")

            question = self.catalog.get_question(question_id)
            if question is None:
                raise NotFoundError("question not found")

            if attempt.is_completed:
                raise ConflictError("attempt already completed")

            evaluation = evaluate(question, answer_text)
            answer = self.repository.upsert_answer(
                attempt_id=attempt_id,
                question_id=question_id,
                answer_text=answer_text,
                evaluation=evaluation,
            )
            self.repository.commit()
        except Exception:
            self.repository.rollback()
            raise

        log.info(
            "answer recorded attempt_id=%s question_id=%s verdict=%s points=%s",
            attempt_id,
            question_id,
            evaluation.verdict.value,
            evaluation.points_earned,
        )
        return answer

    def complete_attempt(self, *, attempt_id: uuid.UUID) -> QuizAttempt:
        try:
            attempt = self.repository.lock_attempt(attempt_id)
            if attempt is None:
                raise NotFoundError("attempt not found")
            if attempt.is_completed:
                log.warning("completion rejected attempt_id=%s reason=already_completed", attempt_id)
                raise ConflictError("attempt already completed")

            total_score = aggregate(self.repository.list_answers(attempt_id))
            # max_score is frozen at start; questions added since then cannot lift the total past it.
            if total_score > attempt.max_score:
                log.warning(
                    "total capped attempt_id=%s total_score=%s max_score=%s",
                    attempt_id,
                    total_score,
                    attempt.max_score,
                )
                total_score = attempt.max_score
            completed_at = datetime.now(timezone.utc)

            # Conditional update: a concurrent completion that got here first leaves zero rows to update.
            if not self.repository.mark_completed(attempt_id, total_score=total_score, completed_at=completed_at):
                log.warning("completion rejected attempt_id=%s reason=lost_race", attempt_id)
                raise ConflictError("attempt already completed")
            self.repository.commit()
        except Exception:
            self.repository.rollback()
            raise

        attempt = self.repository.refresh(attempt)
        log.info(
            "attempt completed attempt_id=%s total_score=%s max_score=%s",
            attempt_id,
            total_score,
            attempt.max_score,
        )
        return attempt

    def get_attempt_with_answers(self, *, attempt_id: uuid.UUID) -> tuple[QuizAttempt, list[QuizAttemptAnswer]] | None:
        attempt = self.repository.get_attempt(attempt_id)
        if attempt is None:
            return None
        return attempt, self.repository.list_answers(attempt_id)

    def list_attempts_for_student(self, *, student_id: uuid.UUID) -> list[QuizAttempt]:
        return self.repository.list_attempts_for_student(student_id)
