from typing import Protocol

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from studyspace.models.user import User


class IdentityLookup(Protocol):
    """What the workflows need from the user store."""

    def by_username(self, username: str) -> User | None: ...

    def by_username_or_email(self, username: str, email: str) -> User | None: ...

    def create(self, username: str, email: str, password_hash: str) -> User: ...


class SqlIdentityStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def by_username(self, username: str) -> User | None:
        return self.db.execute(select(User).where(User.username == username)).scalar_one_or_none()

    def by_username_or_email(self, username: str, email: str) -> User | None:
        return self.db.execute(
            select(User).where(or_(User.username == username, User.email == email))
        ).scalars().first()

    def create(self, username: str, email: str, password_hash: str) -> User:
        user = User(username=username, email=email, password_hash=password_hash)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
