"""Admin authentication endpoints issuing JWT access tokens."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Literal
from uuid import uuid4

import bcrypt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt  # type: ignore[import-untyped]
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gelato_ops.api.deps import get_db_session
from gelato_ops.core.config import Settings, get_settings
from gelato_ops.models import AdminUser
from gelato_ops.services.clients import EMAIL_PATTERN

logger = logging.getLogger(__name__)

router = APIRouter()
security_scheme = HTTPBearer(auto_error=True)
optional_security_scheme = HTTPBearer(auto_error=False)

MIN_PASSWORD_LENGTH = 8


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    full_name: str | None = None


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class SessionResponse(BaseModel):
    user_id: str
    email: str
    full_name: str | None
    expires_at: datetime


class TokenPayload(BaseModel):
    sub: str
    email: str
    type: Literal["access"]
    iat: datetime
    exp: datetime
    jti: str


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str
    email: str
    token_id: str
    expires_at: datetime


def hash_password(raw_password: str) -> str:
    return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _verify_password(raw_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(raw_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:  # pragma: no cover - invalid hash format
        return False


def create_access_token(user: AdminUser, settings: Settings) -> TokenResponse:
    now = datetime.now(UTC)
    payload = {
        "sub": user.id,
        "email": user.email,
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.access_token_expire_minutes)).timestamp()),
        "jti": uuid4().hex,
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return TokenResponse(access_token=token, expires_in=settings.access_token_expire_minutes * 60)


def _decode_token(*, token: str, settings: Settings) -> TokenPayload:
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc
    try:
        return TokenPayload(**payload)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security_scheme),
) -> AuthenticatedUser:
    payload = _decode_token(token=credentials.credentials, settings=get_settings())
    return AuthenticatedUser(
        user_id=payload.sub,
        email=payload.email,
        token_id=payload.jti,
        expires_at=payload.exp,
    )


def _normalise_email(email: str) -> str:
    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid email address",
        )
    return email


@router.post("/login", response_model=TokenResponse, summary="Issue a JWT access token")
def login(request: LoginRequest, session: Session = Depends(get_db_session)) -> TokenResponse:
    email = _normalise_email(request.email)
    user = session.scalar(select(AdminUser).where(AdminUser.email == email))
    if user is None or not _verify_password(request.password, user.hashed_password):
        logger.info("rejected login", extra={"email": email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return create_access_token(user, get_settings())


@router.post(
    "/signup",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an admin account",
)
def signup(
    request: SignupRequest,
    session: Session = Depends(get_db_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_security_scheme),
) -> SessionResponse:
    """Create an admin. Only the very first account may be created without a token."""

    has_admins = session.scalar(select(func.count(AdminUser.id))) > 0
    if has_admins:
        if credentials is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        _decode_token(token=credentials.credentials, settings=get_settings())

    user = AdminUser(
        email=_normalise_email(request.email),
        full_name=request.full_name,
        hashed_password=hash_password(request.password),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered") from exc
    session.refresh(user)
    settings = get_settings()
    return SessionResponse(
        user_id=user.id,
        email=user.email,
        full_name=user.full_name,
        expires_at=datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes),
    )


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT, summary="Change the current password")
def change_password(
    request: PasswordChangeRequest,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> None:
    account = session.get(AdminUser, user.user_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account no longer exists")
    if not _verify_password(request.current_password, account.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
    account.hashed_password = hash_password(request.new_password)
    session.commit()


@router.get("/session", response_model=SessionResponse, summary="Describe the current session")
def current_session(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> SessionResponse:
    account = session.get(AdminUser, user.user_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account no longer exists")
    return SessionResponse(
        user_id=account.id,
        email=account.email,
        full_name=account.full_name,
        expires_at=user.expires_at,
    )


__all__ = [
    "AuthenticatedUser",
    "create_access_token",
    "get_current_user",
    "hash_password",
    "router",
]
