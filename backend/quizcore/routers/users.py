from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizcore.db.session import get_db
from quizcore.models.user import User
from quizcore.schemas.user import UserCreateRequest, UserResponse
from quizcore.services.authoring import AuthoringService

router = APIRouter(prefix="/users", tags=["users"])


def _user_out(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        name=user.name,
        role=user.role.value,
        created_at=user.created_at,
    )


@router.post("", response_model=UserResponse, status_code=201)
def create_user(body: UserCreateRequest, db: Session = Depends(get_db)):
    user = AuthoringService(db).create_user(email=body.email, name=body.name, role=body.role)
    return _user_out(user)


@router.get("", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return [_user_out(u) for u in AuthoringService(db).list_users()]
