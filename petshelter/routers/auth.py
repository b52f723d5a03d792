"""Registration and login endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petshelter.db import get_db
from petshelter.models.user import User, UserRole
from petshelter.schemas.auth import LoginRequest, MessageRead, TokenRead
from petshelter.schemas.user import UserCreate
from petshelter.security import create_access_token, hash_password, verify_password
from petshelter.utils.errors import error_response

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


def _email_taken() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error_response("EMAIL_IN_USE", "Email already in use."),
    )


@router.post("/register", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)) -> MessageRead:
    """Create a regular account. Admins are created through ``POST /users``."""

    email = payload.email.lower()
    if db.scalars(select(User).where(User.email == email)).first() is not None:
        raise _email_taken()

    user = User(
        **payload.model_dump(exclude={"password", "email"}),
        email=email,
        password_hash=hash_password(payload.password),
        role=UserRole.REGULAR,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _email_taken() from exc

    logger.info("User registered", extra={"user_id": user.id})
    return MessageRead(message="User registered successfully")


@router.post("/login", response_model=TokenRead)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenRead:
    user = db.scalars(select(User).where(User.email == payload.email.lower())).first()
    if user is None or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_response("INVALID_CREDENTIALS", "Invalid credentials."),
        )
    return TokenRead(token=create_access_token(user), role=user.role, user_id=user.id)
