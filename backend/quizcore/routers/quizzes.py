from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from quizcore.core.ids import parse_id
from quizcore.db.session import get_db
from quizcore.models.quiz import Question, Quiz
from quizcore.schemas.quiz import (
    QuestionCreateRequest,
    QuestionResponse,
    QuizCreateRequest,
    QuizResponse,
    QuizUpdateRequest,
)
from quizcore.services.authoring import AuthoringService

router = APIRouter(prefix="/quizzes", tags=["quizzes"])


def _quiz_out(quiz: Quiz) -> QuizResponse:
    return QuizResponse(
        id=str(quiz.id),
        title=quiz.title,
        description=quiz.description,
        teacher_id=str(quiz.teacher_id),
        is_published=bool(quiz.is_published),
        created_at=quiz.created_at,
        updated_at=quiz.updated_at,
    )


def _question_out(q: Question) -> QuestionResponse:
    return QuestionResponse(
        id=str(q.id),
        quiz_id=str(q.quiz_id),
        type=q.type.value,
        question_text=q.question_text,
        options=list(q.options) if q.options is not None else None,
        expected_answer=q.expected_answer,
        points=q.points,
        order_index=q.order_index,
        created_at=q.created_at,
    )


@router.post("", response_model=QuizResponse, status_code=201)
def create_quiz(body: QuizCreateRequest, db: Session = Depends(get_db)):
    teacher_id = parse_id(body.teacher_id, name="teacher")
    quiz = AuthoringService(db).create_quiz(title=body.title, description=body.description, teacher_id=teacher_id)
    return _quiz_out(quiz)


@router.get("", response_model=list[QuizResponse])
def list_quizzes(db: Session = Depends(get_db)):
    return [_quiz_out(q) for q in AuthoringService(db).list_quizzes()]


@router.get("/{quiz_id}", response_model=QuizResponse)
def get_quiz(quiz_id: str, db: Session = Depends(get_db)):
    quiz = AuthoringService(db).get_quiz(parse_id(quiz_id, name="quiz"))
    if quiz is None:
        raise HTTPException(status_code=404, detail="quiz not found")
    return _quiz_out(quiz)


@router.patch("/{quiz_id}", response_model=QuizResponse)
def update_quiz(quiz_id: str, body: QuizUpdateRequest, db: Session = Depends(get_db)):
    qid = parse_id(quiz_id, name="quiz")
    quiz = AuthoringService(db).update_quiz(qid, changes=body.model_dump(exclude_unset=True))
    return _quiz_out(quiz)


@router.post("/{quiz_id}/questions", response_model=QuestionResponse, status_code=201)
def create_question(quiz_id: str, body: QuestionCreateRequest, db: Session = Depends(get_db)):
    qid = parse_id(quiz_id, name="quiz")
    question = AuthoringService(db).create_question(
        quiz_id=qid,
        type=body.type,
        question_text=body.question_text,
        options=body.options,
        expected_answer=body.expected_answer,
        points=body.points,
        order_index=body.order_index,
    )
    return _question_out(question)


@router.get("/{quiz_id}/questions", response_model=list[QuestionResponse])
def list_questions(quiz_id: str, db: Session = Depends(get_db)):
    qid = parse_id(quiz_id, name="quiz")
    return [_question_out(q) for q in AuthoringService(db).list_questions(qid)]
