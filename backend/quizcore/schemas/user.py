from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from quizcore.models.user import UserRole


class UserCreateRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: str = Field(min_length=1, max_length=200)
    role: UserRole


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str
    created_at: datetime
