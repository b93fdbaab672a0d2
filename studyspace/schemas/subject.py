from pydantic import BaseModel, ConfigDict, Field

from studyspace.schemas.academic_group import AcademicGroupPublic
from studyspace.schemas.group import GroupPublic
from studyspace.schemas.pagination import PaginationMeta


class SubjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    academic_group_id: int


class SubjectUpdate(BaseModel):
    name: str


class SubjectPublic(BaseModel):
    id: int
    name: str
    academic_group_id: int

    model_config = ConfigDict(from_attributes=True)


class SubjectDetail(BaseModel):
    id: int
    name: str
    academic_group: AcademicGroupPublic
    groups: list[GroupPublic] = []


class SubjectsResponse(BaseModel):
    subjects: list[SubjectPublic]
    pagination: PaginationMeta


class SubjectsDetailResponse(BaseModel):
    subjects: list[SubjectDetail]
    pagination: PaginationMeta
