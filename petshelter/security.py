"""Password hashing, JWT issuance and FastAPI auth dependencies."""
from __future__ import annotations

from datetime import timedelta

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, VerifyMismatchError
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from petshelter.config import get_settings
from petshelter.db import get_db
from petshelter.models.user import User, UserRole
from petshelter.utils.errors import error_response
from petshelter.utils.time import utcnow

JWT_ALGORITHM = "HS256"

_password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError):
        return False


def create_access_token(user: User) -> str:
    """Sign a short-lived token carrying the user id and role."""

    settings = get_settings()
    now = utcnow()
    payload = {
        "sub": str(user.id),
        "role": UserRole(user.role).value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.JWT_ACCESS_TTL_MINUTES)).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error_response(code, message),
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> int:
    """Validate ``token`` and return the user id it was issued for."""

    try:
        payload = jwt.decode(token, get_settings().JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise _unauthorized("TOKEN_EXPIRED", "Token expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise _unauthorized("INVALID_TOKEN", "Invalid token.") from exc

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise _unauthorized("INVALID_TOKEN", "Invalid token.") from exc


def _extract_bearer(authorization: str | None = Header(default=None)) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(
    db: Session = Depends(get_db),
    token: str | None = Depends(_extract_bearer),
) -> User:
    """Resolve the authenticated user from the bearer token."""

    if not token:
        raise _unauthorized("MISSING_TOKEN", "Missing token.")
    user = db.get(User, decode_access_token(token))
    if user is None:
        raise _unauthorized("INVALID_TOKEN", "Invalid token.")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_response("ADMIN_ONLY", "Access denied, admins only."),
        )
    return user


def ensure_self_or_admin(user: User, owner_id: int | None, *, message: str) -> None:
    """Raise 403 unless ``user`` owns the resource or is an admin."""

    if user.is_admin or (owner_id is not None and owner_id == user.id):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=error_response("FORBIDDEN", message),
    )


__all__ = [
    "create_access_token",
    "decode_access_token",
    "ensure_self_or_admin",
    "get_current_user",
    "hash_password",
    "require_admin",
    "verify_password",
]
