import uuid
from decimal import Decimal

import pytest

from quizcore.core.errors import ConflictError, NotFoundError, PreconditionError
from quizcore.models.quiz import QuestionType
from quizcore.models.user import UserRole
from quizcore.services.authoring import AuthoringService


@pytest.fixture()
def authoring(db):
    return AuthoringService(db)


def _email() -> str:
    return f"{uuid.uuid4().hex[:10]}@example.com"


def test_create_user_rejects_duplicate_email(authoring):
    email = _email()
    user = authoring.create_user(email=email, name="Ada", role=UserRole.student)
    assert user.role == UserRole.student

    with pytest.raises(ConflictError):
        authoring.create_user(email=email, name="Other", role=UserRole.teacher)

    assert email in {u.email for u in authoring.list_users()}


def test_create_quiz_requires_teacher(authoring):
    teacher = authoring.create_user(email=_email(), name="T", role=UserRole.teacher)
    student = authoring.create_user(email=_email(), name="S", role=UserRole.student)

    quiz = authoring.create_quiz(title="Algebra", description=None, teacher_id=teacher.id)
    assert quiz.is_published is False
    assert quiz.description is None

    with pytest.raises(NotFoundError):
        authoring.create_quiz(title="Algebra", description=None, teacher_id=uuid.uuid4())
    with pytest.raises(PreconditionError):
        authoring.create_quiz(title="Algebra", description=None, teacher_id=student.id)


def test_update_quiz_changes_only_given_fields(authoring, make_quiz):
    quiz = make_quiz(published=False, title="Before")
    quiz_id = quiz.id
    authoring.update_quiz(quiz_id, changes={"description": "Intro"})
    before = quiz.updated_at

    updated = authoring.update_quiz(quiz_id, changes={"is_published": True})

    assert updated.title == "Before"
    assert updated.description == "Intro"
    assert updated.is_published is True
    assert updated.updated_at >= before

    cleared = authoring.update_quiz(quiz_id, changes={"description": None})
    assert cleared.description is None

    with pytest.raises(NotFoundError):
        authoring.update_quiz(uuid.uuid4(), changes={"title": "x"})


def test_create_question_and_list_in_order(authoring, make_quiz):
    quiz = make_quiz()
    authoring.create_question(
        quiz_id=quiz.id,
        type=QuestionType.essay,
        question_text="Explain",
        points=Decimal("5"),
        order_index=2,
        expected_answer="ignored",
    )
    authoring.create_question(
        quiz_id=quiz.id,
        type=QuestionType.multiple_choice,
        question_text="Pick",
        points=Decimal("2.5"),
        order_index=0,
        options=["A", "B"],
        expected_answer="A",
    )
    authoring.create_question(
        quiz_id=quiz.id,
        type=QuestionType.true_false,
        question_text="True?",
        points=Decimal("1"),
        order_index=1,
        options=["not", "kept"],
        expected_answer="true",
    )

    questions = authoring.list_questions(quiz.id)

    assert [q.order_index for q in questions] == [0, 1, 2]
    assert questions[0].options == ["A", "B"]
    assert questions[1].options is None
    assert questions[2].expected_answer is None
    assert questions[0].points == Decimal("2.5")


def test_create_question_rejects_duplicate_order_and_unknown_quiz(authoring, make_quiz):
    quiz = make_quiz()
    authoring.create_question(
        quiz_id=quiz.id, type=QuestionType.short_answer, question_text="Q", points=Decimal("1"), order_index=0
    )

    with pytest.raises(ConflictError):
        authoring.create_question(
            quiz_id=quiz.id, type=QuestionType.short_answer, question_text="Q2", points=Decimal("1"), order_index=0
        )
    with pytest.raises(NotFoundError):
        authoring.create_question(
            quiz_id=uuid.uuid4(), type=QuestionType.short_answer, question_text="Q", points=Decimal("1"), order_index=0
        )
