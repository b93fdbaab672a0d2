"""Default academic groups and subjects for a fresh database."""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from studyspace.models.academic_group import AcademicGroup
from studyspace.models.subject import Subject

logger = logging.getLogger(__name__)

DEFAULT_ACADEMIC_GROUPS = ["ЭФМО-01-24", "ИКБО-14-20", "ИКБО-15-20"]

# (nombre, índice del grupo académico)
DEFAULT_SUBJECTS = [
    ("Mathematics", 0),
    ("Physics", 1),
    ("Computer Science", 0),
    ("English Literature", 1),
    ("History", 0),
]


def _is_empty(db: Session, model) -> bool:
    return db.execute(select(func.count()).select_from(model)).scalar_one() == 0


def seed_academic_groups(db: Session) -> list[AcademicGroup]:
    if not _is_empty(db, AcademicGroup):
        logger.debug("Academic groups already present, skipping seed")
        return db.execute(select(AcademicGroup).order_by(AcademicGroup.id.asc())).scalars().all()

    groups = [AcademicGroup(name=name) for name in DEFAULT_ACADEMIC_GROUPS]
    db.add_all(groups)
    db.commit()

    logger.info("Academic groups seeded", extra={"entity": "academic_groups", "count": len(groups)})
    return groups


def seed_subjects(db: Session, academic_groups: list[AcademicGroup]) -> None:
    if not academic_groups:
        logger.warning("No academic groups found, subjects not seeded")
        return

    existing = set(db.execute(select(Subject.name)).scalars().all())
    created = 0
    for name, idx in DEFAULT_SUBJECTS:
        if name in existing:
            continue
        ag = academic_groups[idx] if idx < len(academic_groups) else academic_groups[0]
        db.add(Subject(name=name, academic_group_id=ag.id))
        created += 1
    db.commit()

    if created:
        logger.info("Subjects seeded", extra={"entity": "subjects", "count": created})


def seed_defaults(db: Session) -> None:
    groups = seed_academic_groups(db)
    seed_subjects(db, groups)
