from datetime import datetime

from pydantic import BaseModel


class CreateApplicationRequest(BaseModel):
    group_id: int
    message: str = ""


class ReviewApplicationRequest(BaseModel):
    username: str
    # validado en el servicio para devolver InvalidStatus (400), no 422
    status: str


class GroupApplicationPublic(BaseModel):
    application_id: int
    group_id: int
    user_id: int
    username: str
    message: str
    status: str
    created_at: datetime


def to_application_public(app) -> GroupApplicationPublic:
    return GroupApplicationPublic(
        application_id=app.application_id,
        group_id=app.group_id,
        user_id=app.user_id,
        username=app.user.username,
        message=app.message,
        status=app.status,
        created_at=app.created_at,
    )
