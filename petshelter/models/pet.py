"""Pet model."""
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, Enum as SqlEnum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UpdatedAtMixin


class PetSpecies(str, PyEnum):
    DOG = "Dog"
    CAT = "Cat"


class PetStatus(str, PyEnum):
    """Adoption state of a pet."""

    AVAILABLE = "Available"
    ADOPTED = "Adopted"


def _enum_values(enum: type[PyEnum]) -> list[str]:
    return [member.value for member in enum]


class Pet(UpdatedAtMixin, Base):
    """A pet listed by a user; the owner is the adopter once status is Adopted."""

    __tablename__ = "pets"
    __table_args__ = (
        CheckConstraint("age >= 1 AND age <= 30", name="ck_pets_age_range"),
        Index("ix_pets_status", "status"),
        Index("ix_pets_user_id", "user_id"),
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    species: Mapped[PetSpecies] = mapped_column(
        SqlEnum(PetSpecies, name="petspecies", values_callable=_enum_values), nullable=False
    )
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[PetStatus] = mapped_column(
        SqlEnum(PetStatus, name="petstatus", values_callable=_enum_values),
        nullable=False,
        default=PetStatus.AVAILABLE,
    )
    image: Mapped[str] = mapped_column(String(500), nullable=False)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    owner = relationship("User", back_populates="pets")
