"""User schemas."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from petshelter.models.user import UserRole

PHONE_PATTERN = r"^[0-9]{10,15}$"


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    phone: str = Field(pattern=PHONE_PATTERN)
    city: str = Field(min_length=1, max_length=120)
    age: int = Field(ge=18, le=100)
    password: str = Field(min_length=6, max_length=128)

    model_config = ConfigDict(str_strip_whitespace=True)


class AdminUserCreate(UserCreate):
    role: UserRole = UserRole.REGULAR


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    city: str | None = Field(default=None, min_length=1, max_length=120)
    age: int | None = Field(default=None, ge=18, le=100)

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "UserUpdate":
        """Fields may be omitted but not cleared."""

        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class UserRead(BaseModel):
    id: int
    name: str
    email: EmailStr
    phone: str
    city: str
    age: int
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OwnerSummary(BaseModel):
    id: int
    name: str
    email: EmailStr
    city: str

    model_config = ConfigDict(from_attributes=True)
