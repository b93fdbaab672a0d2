from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from studyspace.core.database import get_db
from studyspace.core.security import decode_access_token
from studyspace.models.user import User

security = HTTPBearer(auto_error=False)


def get_current_username(
    creds: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Subject of a verified Bearer token. Does not touch the database."""
    if creds is None:
        raise HTTPException(status_code=401, detail="Missing Bearer token")

    username = decode_access_token(creds.credentials)
    if username is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return username


def get_current_user(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db),
) -> User:
    user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="User does not exist")
    return user
