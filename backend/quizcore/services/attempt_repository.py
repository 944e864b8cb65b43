from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from quizcore.models.attempt import QuizAttempt, QuizAttemptAnswer
from quizcore.models.quiz import Question
from quizcore.services.evaluator import Evaluation


class AttemptRepository:
    """SQLAlchemy-backed storage for attempts and their answers.

    The repository never commits on its own; the ledger decides when a unit of
    work is finished so that a failed operation leaves nothing behind.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_attempt(self, *, quiz_id: uuid.UUID, student_id: uuid.UUID, max_score: Decimal) -> QuizAttempt:
        attempt = QuizAttempt(
            quiz_id=quiz_id,
            student_id=student_id,
            started_at=datetime.now(timezone.utc),
            max_score=max_score,
            completed_at=None,
            total_score=None,
        )
        self.db.add(attempt)
        self.db.flush()
        return attempt

    def get_attempt(self, attempt_id: uuid.UUID) -> QuizAttempt | None:
        return self.db.scalar(select(QuizAttempt).where(QuizAttempt.id == attempt_id))

    def lock_attempt(self, attempt_id: uuid.UUID) -> QuizAttempt | None:
        # Row lock on backends that support it; SQLite serializes writers anyway.
        return self.db.scalar(
            select(QuizAttempt)
            .where(QuizAttempt.id == attempt_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    def get_answer(self, *, attempt_id: uuid.UUID, question_id: uuid.UUID) -> QuizAttemptAnswer | None:
        return self.db.scalar(
            select(QuizAttemptAnswer).where(
                QuizAttemptAnswer.attempt_id == attempt_id,
                QuizAttemptAnswer.question_id == question_id,
            )
        )

    def upsert_answer(
        self,
        *,
        attempt_id: uuid.UUID,
        question_id: uuid.UUID,
        answer_text: str,
        evaluation: Evaluation,
    ) -> QuizAttemptAnswer:
        now = datetime.now(timezone.utc)
        answer = self.get_answer(attempt_id=attempt_id, question_id=question_id)
        if answer is None:
            answer = QuizAttemptAnswer(attempt_id=attempt_id, question_id=question_id, created_at=now)
            self.db.add(answer)

        answer.answer_text = answer_text
        answer.verdict = evaluation.verdict
        answer.is_correct = evaluation.is_correct
        answer.points_earned = evaluation.points_earned
        answer.updated_at = now
        self.db.flush()
        return answer

    def list_answers(self, attempt_id: uuid.UUID) -> list[QuizAttemptAnswer]:
        return list(
            self.db.scalars(
                select(QuizAttemptAnswer)
                .join(Question, Question.id == QuizAttemptAnswer.question_id)
                .where(QuizAttemptAnswer.attempt_id == attempt_id)
                .order_by(Question.order_index, QuizAttemptAnswer.created_at)
            )
        )

    def mark_completed(self, attempt_id: uuid.UUID, *, total_score: Decimal, completed_at: datetime) -> bool:
        """Seal the attempt only if it is still open. Returns False when another caller won."""
        result = self.db.execute(
            update(QuizAttempt)
            .where(QuizAttempt.id == attempt_id, QuizAttempt.completed_at.is_(None))
            .values(completed_at=completed_at, total_score=total_score)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0) == 1

    def list_attempts_for_student(self, student_id: uuid.UUID) -> list[QuizAttempt]:
        return list(
            self.db.scalars(
                select(QuizAttempt)
                .where(QuizAttempt.student_id == student_id)
                .order_by(QuizAttempt.started_at.desc(), QuizAttempt.id)
            )
        )

    def refresh(self, attempt: QuizAttempt) -> QuizAttempt:
        self.db.refresh(attempt)
        return attempt

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
