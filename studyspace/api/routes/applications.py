from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studyspace.api.deps import get_db
from studyspace.core.auth import get_current_username
from studyspace.realtime.sse import publish
from studyspace.schemas.application import (
    CreateApplicationRequest,
    GroupApplicationPublic,
    ReviewApplicationRequest,
    to_application_public,
)
from studyspace.services.applications import GroupApplicationService

router = APIRouter(prefix="/api/groups/applications", tags=["group_applications"])


def get_application_service(db: Session = Depends(get_db)) -> GroupApplicationService:
    return GroupApplicationService(db)


@router.post("", status_code=201)
def create_application(
    payload: CreateApplicationRequest,
    username: str = Depends(get_current_username),
    service: GroupApplicationService = Depends(get_application_service),
):
    application = service.apply_to_group(username, payload.group_id, payload.message)

    publish(
        "APPLICATION_SUBMITTED",
        {
            "application_id": application.application_id,
            "group_id": application.group_id,
            "username": username,
        },
    )
    return {"message": "Application submitted successfully", "application_id": application.application_id}


@router.get("/pending", response_model=list[GroupApplicationPublic])
def get_pending_applications(
    limit: int | None = Query(None, ge=1, le=1000),
    username: str = Depends(get_current_username),
    service: GroupApplicationService = Depends(get_application_service),
):
    applications = service.get_pending_applications(username, limit=limit)
    return [to_application_public(a) for a in applications]


@router.patch("/{group_id}/review")
def review_application(
    group_id: int,
    payload: ReviewApplicationRequest,
    username: str = Depends(get_current_username),
    service: GroupApplicationService = Depends(get_application_service),
):
    application = service.review_application(group_id, payload.username, username, payload.status)

    publish(
        "APPLICATION_REVIEWED",
        {
            "application_id": application.application_id,
            "group_id": group_id,
            "username": payload.username,
            "status": application.status,
        },
    )
    return {"message": "Application reviewed successfully", "status": application.status}
