from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from quizcore.schemas.common import Score


class AttemptStartRequest(BaseModel):
    quiz_id: str
    student_id: str


class AnswerSubmitRequest(BaseModel):
    question_id: str
    answer_text: str


class AttemptResponse(BaseModel):
    id: str
    quiz_id: str
    student_id: str
    started_at: datetime
    completed_at: datetime | None
    max_score: Score
    total_score: Score | None


class AnswerResponse(BaseModel):
    id: str
    attempt_id: str
    question_id: str
    answer_text: str
    verdict: str
    is_correct: bool | None
    points_earned: Score | None
    created_at: datetime
    updated_at: datetime


class AttemptWithAnswersResponse(BaseModel):
    attempt: AttemptResponse
    answers: list[AnswerResponse]
