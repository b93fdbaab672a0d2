from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AcademicGroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class AcademicGroupUpdate(BaseModel):
    name: str


class AcademicGroupPublic(BaseModel):
    id: int
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
