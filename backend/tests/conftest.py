import os
import sys
import time
import uuid
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

backend_dir = Path(__file__).resolve().parents[1]
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# The real engine is swapped below; keep import-time engine creation off Postgres.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")

from sqlalchemy import create_engine, func, select
from sqlalchemy.pool import StaticPool

from quizcore.db.base import Base
from quizcore.db import session as session_module
from quizcore.main import create_app

# Import models so that they are registered in Base.metadata before create_all.
from quizcore.models.user import User, UserRole
from quizcore.models.quiz import Question, QuestionType, Quiz
from quizcore.models.attempt import QuizAttempt, QuizAttemptAnswer  # noqa: F401


class _MemoryRedis:
    def __init__(self):
        self._data: dict[str, tuple[str, float | None]] = {}

    def ping(self):
        return True

    def _now(self) -> float:
        return time.time()

    def _get_entry(self, key: str):
        v = self._data.get(key)
        if not v:
            return None
        value, exp = v
        if exp is not None and exp <= self._now():
            self._data.pop(key, None)
            return None
        return value, exp

    def get(self, key: str):
        entry = self._get_entry(key)
        return entry[0] if entry else None

    def set(self, key: str, value: str, ex: int | None = None):
        exp = (self._now() + int(ex)) if ex else None
        self._data[key] = (value, exp)
        return True

    def delete(self, key: str):
        self._data.pop(key, None)
        return 1

    def incr(self, key: str):
        cur = self.get(key)
        n = int(cur or 0) + 1
        _, exp = self._data.get(key, ("", None))
        self._data[key] = (str(n), exp)
        return n

    def expire(self, key: str, seconds: int):
        entry = self._get_entry(key)
        if not entry:
            return False
        value, _ = entry
        self._data[key] = (value, self._now() + int(seconds))
        return True

    def ttl(self, key: str):
        entry = self._get_entry(key)
        if not entry:
            return -2
        _, exp = entry
        if exp is None:
            return -1
        return max(0, int(exp - self._now()))

    def flushall(self):
        self._data.clear()


# Configure test DB (SQLite in-memory) at import time so all tests importing
# quizcore.db.session.SessionLocal will get the patched version.
_engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
Base.metadata.create_all(bind=_engine)
session_module.engine = _engine
session_module.SessionLocal = session_module.sessionmaker(autocommit=False, autoflush=False, bind=_engine)


# Stub Redis at import time (rate limiting).
_mem_redis = _MemoryRedis()
import quizcore.core.redis_client as redis_client_module

redis_client_module.get_redis = lambda: _mem_redis


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    _mem_redis.flushall()
    yield


@pytest.fixture(scope="session")
def client():
    app = create_app()

    # Ensure app dependencies use our session factory.
    def _get_db_override():
        db = session_module.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[session_module.get_db] = _get_db_override
    return TestClient(app)


@pytest.fixture()
def db():
    with session_module.SessionLocal() as session:
        yield session


@pytest.fixture()
def make_user(db):
    def _make(*, role: UserRole = UserRole.student, name: str = "Test user") -> User:
        user = User(email=f"{uuid.uuid4().hex[:10]}@example.com", name=name, role=role)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture()
def make_quiz(db, make_user):
    def _make(*, published: bool = True, title: str = "Geography") -> Quiz:
        teacher = make_user(role=UserRole.teacher, name="Teacher")
        quiz = Quiz(title=title, description=None, teacher_id=teacher.id, is_published=published)
        db.add(quiz)
        db.commit()
        return quiz

    return _make


@pytest.fixture()
def add_question(db):
    def _add(
        quiz: Quiz,
        *,
        type: QuestionType = QuestionType.short_answer,
        expected_answer: str | None = "Paris",
        points: str = "10",
        order_index: int | None = None,
        options: list[str] | None = None,
    ) -> Question:
        if order_index is None:
            order_index = db.scalar(select(func.count(Question.id)).where(Question.quiz_id == quiz.id)) or 0
        question = Question(
            quiz_id=quiz.id,
            type=type,
            question_text="What is the capital of France?",
            options=options,
            expected_answer=expected_answer,
            points=Decimal(points),
            order_index=order_index,
        )
        db.add(question)
        db.commit()
        return question

    return _add
