from datetime import datetime

from pydantic import BaseModel, ConfigDict


class GroupUserCreate(BaseModel):
    group_id: int
    user_id: int
    role: str = "member"


class GroupUserUpdate(BaseModel):
    role: str


class GroupUserPublic(BaseModel):
    group_id: int
    user_id: int
    role: str
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupModerCreate(BaseModel):
    group_id: int
    user_id: int


class GroupModerPublic(BaseModel):
    group_id: int
    user_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
