from datetime import datetime

from pydantic import BaseModel, EmailStr


class UserPublic(BaseModel):
    id: int
    username: str


class UserMe(UserPublic):
    email: EmailStr
    created_at: datetime


class MemberPublic(UserPublic):
    role: str


def to_user_public(user) -> UserPublic:
    return UserPublic(id=user.user_id, username=user.username)
