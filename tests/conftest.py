"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

# antes de importar studyspace: settings y engine se crean al importar
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DATA"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import studyspace.models  # noqa: F401
from studyspace.core.database import Base, get_db
from studyspace.core.security import create_access_token, hash_password
from studyspace.models.academic_group import AcademicGroup
from studyspace.models.group import Group
from studyspace.models.membership import GroupMember, GroupModerator, ROLE_ADMIN, ROLE_MEMBER
from studyspace.models.user import User

TEST_PASSWORD = "correct-horse-battery"

# un solo hash para todos los usuarios de test: bcrypt es lento
_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine) -> Session:
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session."""
    from studyspace.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_user(db: Session):
    def _make(username: str, email: str | None = None) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=_PASSWORD_HASH,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def academic_group(db: Session) -> AcademicGroup:
    ag = AcademicGroup(name="ИКБО-14-20")
    db.add(ag)
    db.commit()
    db.refresh(ag)
    return ag


@pytest.fixture
def make_group(db: Session, academic_group: AcademicGroup):
    """Group with its admin already in group_users, like POST /api/groups does."""

    def _make(admin: User, name: str = "Study group") -> Group:
        group = Group(name=name, academic_group_id=academic_group.id, admin_id=admin.user_id)
        db.add(group)
        db.flush()
        db.add(GroupMember(group_id=group.id, user_id=admin.user_id, role=ROLE_ADMIN))
        db.commit()
        db.refresh(group)
        return group

    return _make


@pytest.fixture
def add_member(db: Session):
    def _add(group: Group, user: User, role: str = ROLE_MEMBER) -> GroupMember:
        member = GroupMember(group_id=group.id, user_id=user.user_id, role=role)
        db.add(member)
        db.commit()
        return member

    return _add


@pytest.fixture
def add_moderator(db: Session):
    def _add(group: Group, user: User) -> GroupModerator:
        moder = GroupModerator(group_id=group.id, user_id=user.user_id)
        db.add(moder)
        db.commit()
        return moder

    return _add


def auth_headers(username: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(username)}"}


@pytest.fixture
def headers():
    return auth_headers


@pytest.fixture
def password() -> str:
    """Plain password of every user built by ``make_user``."""
    return TEST_PASSWORD
