from pydantic import BaseModel, Field

from studyspace.schemas.pagination import PaginationMeta
from studyspace.schemas.user import UserPublic


class GroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    academic_group_id: int


class GroupUpdate(BaseModel):
    name: str


class GroupPublic(BaseModel):
    id: int
    name: str
    admin_username: str
    academic_group_id: int
    academic_group_name: str


class GroupsResponse(BaseModel):
    groups: list[GroupPublic]
    pagination: PaginationMeta


class ModeratorsResponse(BaseModel):
    admin: UserPublic
    moderators: list[UserPublic] = []


def to_group_public(group) -> GroupPublic:
    return GroupPublic(
        id=group.id,
        name=group.name,
        admin_username=group.admin.username,
        academic_group_id=group.academic_group_id,
        academic_group_name=group.academic_group.name,
    )
