from sqlalchemy import select
from sqlalchemy.orm import Session

from studyspace.models.group import Group
from studyspace.models.membership import GroupMember, GroupModerator


def is_admin_or_moderator(db: Session, group_id: int, user_id: int) -> bool:
    # grupo inexistente o sin fila de moderador => False, nunca error
    admin_id = db.execute(select(Group.admin_id).where(Group.id == group_id)).scalar_one_or_none()
    if admin_id is not None and admin_id == user_id:
        return True

    return db.execute(
        select(GroupModerator.user_id).where(
            GroupModerator.group_id == group_id,
            GroupModerator.user_id == user_id,
        )
    ).first() is not None


def is_group_member(db: Session, group_id: int, user_id: int) -> bool:
    return db.execute(
        select(GroupMember.user_id).where(
            GroupMember.group_id == group_id,
            GroupMember.user_id == user_id,
        )
    ).first() is not None


def managed_group_ids(db: Session, user_id: int) -> list[int]:
    """Ids of groups where the user is admin or moderator, in store order."""
    rows = db.execute(
        select(Group.id)
        .outerjoin(GroupModerator, GroupModerator.group_id == Group.id)
        .where((Group.admin_id == user_id) | (GroupModerator.user_id == user_id))
        .order_by(Group.id.asc())
    ).all()

    seen: list[int] = []
    for (gid,) in rows:
        if gid not in seen:
            seen.append(gid)
    return seen
