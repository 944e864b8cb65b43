from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from quizcore.core.ids import parse_id
from quizcore.core.rate_limit import rate_limit
from quizcore.db.session import get_db
from quizcore.models.attempt import QuizAttempt, QuizAttemptAnswer
from quizcore.schemas.attempt import (
    AnswerResponse,
    AnswerSubmitRequest,
    AttemptResponse,
    AttemptStartRequest,
    AttemptWithAnswersResponse,
)
from quizcore.services.attempts import AttemptLedger

router = APIRouter(tags=["attempts"])


def _attempt_out(attempt: QuizAttempt) -> AttemptResponse:
    return AttemptResponse(
        id=str(attempt.id),
        quiz_id=str(attempt.quiz_id),
        student_id=str(attempt.student_id),
        started_at=attempt.started_at,
        completed_at=attempt.completed_at,
        max_score=attempt.max_score,
        total_score=attempt.total_score,
    )


def _answer_out(answer: QuizAttemptAnswer) -> AnswerResponse:
    return AnswerResponse(
        id=str(answer.id),
        attempt_id=str(answer.attempt_id),
        question_id=str(answer.question_id),
        answer_text=answer.answer_text,
        verdict=answer.verdict.value,
        is_correct=answer.is_correct,
        points_earned=answer.points_earned,
        created_at=answer.created_at,
        updated_at=answer.updated_at,
    )


@router.post("/attempts", response_model=AttemptResponse, status_code=201)
def start_attempt(
    body: AttemptStartRequest,
    db: Session = Depends(get_db),
    _: object = rate_limit(key_prefix="attempt_start", limit_setting="attempt_start_rate_limit"),
):
    quiz_id = parse_id(body.quiz_id, name="quiz")
    student_id = parse_id(body.student_id, name="student")

    attempt = AttemptLedger.for_session(db).start_attempt(quiz_id=quiz_id, student_id=student_id)
    return _attempt_out(attempt)


@router.post("/attempts/{attempt_id}/answers", response_model=AnswerResponse)
def submit_answer(
    attempt_id: str,
    body: AnswerSubmitRequest,
    db: Session = Depends(get_db),
    _: object = rate_limit(key_prefix="answer_submit", limit_setting="answer_submit_rate_limit"),
):
    aid = parse_id(attempt_id, name="attempt")
    qid = parse_id(body.question_id, name="question")

    answer = AttemptLedger.for_session(db).submit_answer(attempt_id=aid, question_id=qid, answer_text=body.answer_text)
    return _answer_out(answer)


@router.post("/attempts/{attempt_id}/complete", response_model=AttemptResponse)
def complete_attempt(attempt_id: str, db: Session = Depends(get_db)):
    aid = parse_id(attempt_id, name="attempt")
    attempt = AttemptLedger.for_session(db).complete_attempt(attempt_id=aid)
    return _attempt_out(attempt)


@router.get("/attempts/{attempt_id}", response_model=AttemptWithAnswersResponse)
def get_attempt(attempt_id: str, db: Session = Depends(get_db)):
    aid = parse_id(attempt_id, name="attempt")
    found = AttemptLedger.for_session(db).get_attempt_with_answers(attempt_id=aid)
    if found is None:
        raise HTTPException(status_code=404, detail="attempt not found")

    attempt, answers = found
    return AttemptWithAnswersResponse(attempt=_attempt_out(attempt), answers=[_answer_out(a) for a in answers])


@router.get("/students/{student_id}/attempts", response_model=list[AttemptResponse])
def list_student_attempts(student_id: str, db: Session = Depends(get_db)):
    sid = parse_id(student_id, name="student")
    attempts = AttemptLedger.for_session(db).list_attempts_for_student(student_id=sid)
    return [_attempt_out(a) for a in attempts]
