"""Join-application workflow for study groups.

A user applies to a group (one pending application per group at a time);
the group's admin or one of its moderators reviews it. Approval turns the
applicant into a member in the same transaction that records the decision.
Reviewed applications are terminal: only pending ones can be reviewed.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studyspace.models.application import (
    GroupApplication,
    REVIEW_DECISIONS,
    STATUS_APPROVED,
    STATUS_PENDING,
)
from studyspace.models.group import Group
from studyspace.models.membership import GroupMember, ROLE_MEMBER
from studyspace.models.user import User
from studyspace.services import permissions
from studyspace.services.errors import (
    AlreadyMember,
    ApplicationNotFound,
    DuplicateApplication,
    GroupNotFound,
    InvalidStatus,
    NotAuthenticated,
    Unauthorized,
    UserNotFound,
)
from studyspace.services.identity import IdentityLookup, SqlIdentityStore

module_logger = logging.getLogger(__name__)


class GroupApplicationService:
    def __init__(
        self,
        db: Session,
        identities: IdentityLookup | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.db = db
        self.identities = identities or SqlIdentityStore(db)
        self.logger = logger or module_logger

    def _resolve(self, username: str, error: UserNotFound) -> User:
        user = self.identities.by_username(username)
        if user is None:
            self.logger.error("Failed to find user", extra={"username": username})
            raise error
        return user

    def apply_to_group(self, username: str | None, group_id: int, message: str = "") -> GroupApplication:
        if not username:
            self.logger.error("User not authenticated")
            raise NotAuthenticated()

        user = self._resolve(username, UserNotFound("failed to find authenticated user"))

        if self.db.get(Group, group_id) is None:
            raise GroupNotFound()

        self.logger.debug(
            "Checking group membership",
            extra={"username": username, "user_id": user.user_id, "group_id": group_id},
        )
        if permissions.is_group_member(self.db, group_id, user.user_id):
            self.logger.warning(
                "Applicant is already a group member",
                extra={"user_id": user.user_id, "group_id": group_id},
            )
            raise AlreadyMember()

        if self._pending(group_id, user.user_id) is not None:
            self.logger.warning(
                "Application already submitted and pending",
                extra={"user_id": user.user_id, "group_id": group_id},
            )
            raise DuplicateApplication()

        application = GroupApplication(
            group_id=group_id,
            user_id=user.user_id,
            message=message or "",
            status=STATUS_PENDING,
        )
        self.db.add(application)
        try:
            self.db.commit()
        except IntegrityError:
            # carrera: otra petición insertó la pending entre el check y el insert
            self.db.rollback()
            self.logger.warning(
                "Concurrent pending application rejected by unique index",
                extra={"user_id": user.user_id, "group_id": group_id},
            )
            raise DuplicateApplication()
        self.db.refresh(application)

        self.logger.info(
            "Group application created",
            extra={
                "application_id": application.application_id,
                "user_id": user.user_id,
                "group_id": group_id,
            },
        )
        return application

    def get_pending_applications(self, username: str | None, limit: int | None = None) -> list[GroupApplication]:
        if not username:
            raise NotAuthenticated()

        user = self._resolve(username, UserNotFound("failed to find authenticated user"))

        all_apps: list[GroupApplication] = []
        for gid in permissions.managed_group_ids(self.db, user.user_id):
            apps = self.db.execute(
                select(GroupApplication)
                .where(
                    GroupApplication.group_id == gid,
                    GroupApplication.status == STATUS_PENDING,
                )
                .order_by(GroupApplication.application_id.asc())
            ).scalars().all()
            all_apps.extend(apps)
            if limit is not None and len(all_apps) >= limit:
                all_apps = all_apps[:limit]
                break

        self.logger.debug(
            "Fetched pending applications",
            extra={"username": username, "application_count": len(all_apps)},
        )
        return all_apps

    def review_application(
        self,
        group_id: int,
        target_username: str,
        reviewer_username: str | None,
        status: str,
    ) -> GroupApplication:
        self.logger.debug(
            "Processing application review",
            extra={
                "reviewer": reviewer_username,
                "username": target_username,
                "group_id": group_id,
                "status": status,
            },
        )

        if status not in REVIEW_DECISIONS:
            self.logger.error("Invalid status", extra={"status": status})
            raise InvalidStatus()

        if not reviewer_username:
            raise NotAuthenticated()

        reviewer = self._resolve(reviewer_username, UserNotFound("failed to find reviewer"))
        target = self._resolve(target_username, UserNotFound("failed to find target user"))

        if not permissions.is_admin_or_moderator(self.db, group_id, reviewer.user_id):
            self.logger.error(
                "Unauthorized: not an admin or moderator",
                extra={"reviewer_id": reviewer.user_id, "group_id": group_id},
            )
            raise Unauthorized()

        application = self._pending(group_id, target.user_id, for_update=True)
        if application is None:
            raise ApplicationNotFound()

        if status == STATUS_APPROVED and permissions.is_group_member(self.db, group_id, target.user_id):
            raise AlreadyMember()

        # estado + membresía en un solo commit
        application.status = status
        if status == STATUS_APPROVED:
            self.db.add(GroupMember(group_id=group_id, user_id=target.user_id, role=ROLE_MEMBER))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            self.logger.error(
                "Failed to create group user for approved application",
                extra={"group_id": group_id, "user_id": target.user_id},
            )
            raise AlreadyMember()
        self.db.refresh(application)

        self.logger.info(
            "Application reviewed",
            extra={
                "application_id": application.application_id,
                "reviewer_id": reviewer.user_id,
                "user_id": target.user_id,
                "group_id": group_id,
                "status": status,
            },
        )
        return application

    def _pending(self, group_id: int, user_id: int, for_update: bool = False) -> GroupApplication | None:
        stmt = select(GroupApplication).where(
            GroupApplication.group_id == group_id,
            GroupApplication.user_id == user_id,
            GroupApplication.status == STATUS_PENDING,
        )
        if for_update:
            stmt = stmt.with_for_update(of=GroupApplication)
        return self.db.execute(stmt).scalar_one_or_none()
