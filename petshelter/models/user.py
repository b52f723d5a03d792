"""User model."""
from enum import Enum as PyEnum

from sqlalchemy import Enum as SqlEnum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UpdatedAtMixin


class UserRole(str, PyEnum):
    """Authorization roles."""

    REGULAR = "Regular"
    ADMIN = "Admin"


class User(UpdatedAtMixin, Base):
    """Represents a shelter user (adopter or administrator)."""

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_city", "city"),)

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(15), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SqlEnum(UserRole, name="userrole", values_callable=lambda enum: [member.value for member in enum]),
        nullable=False,
        default=UserRole.REGULAR,
    )

    pets = relationship("Pet", back_populates="owner")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
