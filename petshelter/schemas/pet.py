"""Pet schemas."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from petshelter.models.pet import PetSpecies, PetStatus
from petshelter.schemas.user import OwnerSummary


class PetCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    species: PetSpecies
    age: int = Field(ge=1, le=30)
    status: PetStatus = PetStatus.AVAILABLE
    image: str = Field(min_length=1, max_length=500)

    model_config = ConfigDict(str_strip_whitespace=True)


class PetUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    species: PetSpecies | None = None
    age: int | None = Field(default=None, ge=1, le=30)
    status: PetStatus | None = None
    image: str | None = Field(default=None, min_length=1, max_length=500)

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "PetUpdate":
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class PetRead(BaseModel):
    id: int
    name: str
    species: PetSpecies
    age: int
    status: PetStatus
    image: str
    user_id: int | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PetDetail(PetRead):
    owner: OwnerSummary | None = None


class PetDeleted(BaseModel):
    message: str
    pet: PetRead
