import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from studyspace.api.deps import get_db
from studyspace.core.auth import get_current_user
from studyspace.core.security import hash_password, verify_password, create_access_token
from studyspace.models.user import User
from studyspace.schemas.auth import RegisterRequest, LoginRequest, TokenResponse
from studyspace.schemas.user import UserMe
from studyspace.services.errors import UserAlreadyExists
from studyspace.services.identity import SqlIdentityStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    identities = SqlIdentityStore(db)
    if identities.by_username_or_email(payload.username, payload.email):
        raise UserAlreadyExists()

    try:
        hashed = hash_password(payload.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    user = identities.create(payload.username, payload.email, hashed)
    logger.info("User registered", extra={"user_id": user.user_id, "username": user.username})
    return {"message": "User registered successfully"}


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = SqlIdentityStore(db).by_username(payload.username)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid username or password")

    return TokenResponse(token=create_access_token(user.username))


@router.get("/api/me", response_model=UserMe)
def me(user: User = Depends(get_current_user)):
    return UserMe(
        id=user.user_id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
    )
