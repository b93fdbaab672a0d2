from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError
from passlib.context import CryptContext

from studyspace.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    # bcrypt solo usa 72 bytes de input: mejor rechazar que truncar en silencio
    if password and len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError("Password too long for bcrypt (max 72 bytes).")
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        if password and len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            return False
        return pwd_context.verify(password, hashed)
    except ValueError:
        return False


def create_access_token(subject: str, expires_minutes: int | None = None) -> str:
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> str | None:
    """Return the token subject (username), or None if the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        return None
    return sub
