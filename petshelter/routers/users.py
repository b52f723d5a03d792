"""User endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petshelter.db import get_db
from petshelter.models.pet import Pet
from petshelter.models.user import User
from petshelter.schemas.auth import MessageRead
from petshelter.schemas.pet import PetRead
from petshelter.schemas.user import AdminUserCreate, UserRead, UserUpdate
from petshelter.security import ensure_self_or_admin, get_current_user, hash_password, require_admin
from petshelter.services.action_log import record_action
from petshelter.utils.errors import error_response

router = APIRouter(prefix="/users", tags=["users"])

USER_SORTS = {"name": User.name, "age": User.age}


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_response("USER_NOT_FOUND", "User not found."))
    return user


def _email_conflict(db: Session, email: str, *, exclude_id: int | None = None) -> bool:
    stmt = select(User.id).where(User.email == email)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return db.execute(stmt).first() is not None


def _email_in_use() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error_response("EMAIL_IN_USE", "Email already in use."),
    )


@router.get("", response_model=list[UserRead])
def list_users(
    name: str | None = None,
    city: str | None = None,
    age: str | None = None,
    sort: str | None = Query(default=None, pattern="^(name|age)$"),
    db: Session = Depends(get_db),
) -> list[User]:
    """List users; ``name``/``city`` match case-insensitively, a non-numeric ``age`` is ignored."""

    stmt = select(User)
    if name:
        stmt = stmt.where(User.name.ilike(f"%{name}%"))
    if city:
        stmt = stmt.where(User.city.ilike(f"%{city}%"))
    if age and age.isdigit():
        stmt = stmt.where(User.age == int(age))
    stmt = stmt.order_by(USER_SORTS[sort], User.id) if sort else stmt.order_by(User.id)
    return list(db.scalars(stmt).all())


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: AdminUserCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserRead:
    """Create a user with an explicit role (admin only)."""

    email = payload.email.lower()
    if _email_conflict(db, email):
        raise _email_in_use()

    user = User(
        **payload.model_dump(exclude={"password", "email"}),
        email=email,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _email_in_use() from exc

    result = UserRead.model_validate(user)
    record_action(db, admin.id, f"CREATE_USER {user.id}")
    return result


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)) -> User:
    return _get_user_or_404(db, user_id)


@router.get("/{user_id}/pets", response_model=list[PetRead])
def list_user_pets(user_id: int, db: Session = Depends(get_db)) -> list[Pet]:
    """Pets owned (listed or adopted) by a user."""

    _get_user_or_404(db, user_id)
    return list(db.scalars(select(Pet).where(Pet.user_id == user_id).order_by(Pet.id)).all())


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserRead:
    user = _get_user_or_404(db, user_id)
    ensure_self_or_admin(current_user, user.id, message="Not authorized to edit this user.")

    changes = payload.model_dump(exclude_unset=True)
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        if _email_conflict(db, changes["email"], exclude_id=user.id):
            raise _email_in_use()
    for field, value in changes.items():
        setattr(user, field, value)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _email_in_use() from exc

    result = UserRead.model_validate(user)
    record_action(db, current_user.id, f"UPDATE_USER {user.id}")
    return result


@router.delete("/{user_id}", response_model=MessageRead)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageRead:
    user = _get_user_or_404(db, user_id)
    ensure_self_or_admin(current_user, user.id, message="Not authorized to delete this user.")

    actor_id = current_user.id
    db.delete(user)
    db.commit()
    record_action(db, actor_id, f"DELETE_USER {user_id}")
    return MessageRead(message="User deleted successfully")
