"""Pet endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from petshelter.db import get_db
from petshelter.models.pet import Pet, PetSpecies, PetStatus
from petshelter.models.user import User
from petshelter.schemas.pet import PetCreate, PetDeleted, PetDetail, PetRead, PetUpdate
from petshelter.security import ensure_self_or_admin, get_current_user
from petshelter.services.action_log import record_action
from petshelter.utils.errors import error_response

router = APIRouter(prefix="/pets", tags=["pets"])

PET_SORTS = {
    "age": (Pet.age.asc(), Pet.id),
    "age_desc": (Pet.age.desc(), Pet.id),
    "name": (Pet.name.asc(), Pet.id),
}


def _get_pet_or_404(db: Session, pet_id: int) -> Pet:
    pet = db.get(Pet, pet_id)
    if pet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_response("PET_NOT_FOUND", "Pet not found"))
    return pet


@router.get("", response_model=list[PetRead])
def list_pets(
    status_filter: PetStatus | None = Query(default=None, alias="status"),
    name: str | None = None,
    species: PetSpecies | None = None,
    age: str | None = None,
    user_id: int | None = None,
    sort: str | None = Query(default=None, pattern="^(age|age_desc|name)$"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
) -> list[Pet]:
    """Filtered, paginated pet listing. A non-numeric ``age`` is ignored."""

    stmt = select(Pet)
    if status_filter is not None:
        stmt = stmt.where(Pet.status == status_filter)
    if name:
        stmt = stmt.where(Pet.name.ilike(f"%{name}%"))
    if species is not None:
        stmt = stmt.where(Pet.species == species)
    if age and age.isdigit():
        stmt = stmt.where(Pet.age == int(age))
    if user_id is not None:
        stmt = stmt.where(Pet.user_id == user_id)
    stmt = stmt.order_by(*PET_SORTS[sort]) if sort else stmt.order_by(Pet.id)
    stmt = stmt.offset((page - 1) * limit).limit(limit)
    return list(db.scalars(stmt).all())


@router.get("/{pet_id}", response_model=PetDetail)
def get_pet(pet_id: int, db: Session = Depends(get_db)) -> Pet:
    stmt = select(Pet).options(selectinload(Pet.owner)).where(Pet.id == pet_id)
    pet = db.scalars(stmt).first()
    if pet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_response("PET_NOT_FOUND", "Pet not found"))
    return pet


@router.post("", response_model=PetRead, status_code=status.HTTP_201_CREATED)
def create_pet(
    payload: PetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PetRead:
    pet = Pet(**payload.model_dump(), user_id=current_user.id)
    db.add(pet)
    db.commit()

    result = PetRead.model_validate(pet)
    record_action(db, current_user.id, f"CREATE_PET {pet.id}")
    return result


@router.patch("/{pet_id}", response_model=PetRead)
def update_pet(
    pet_id: int,
    payload: PetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PetRead:
    pet = _get_pet_or_404(db, pet_id)
    ensure_self_or_admin(current_user, pet.user_id, message="Not authorized to edit this pet")

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(pet, field, value)
    db.commit()

    result = PetRead.model_validate(pet)
    record_action(db, current_user.id, f"UPDATE_PET {pet.id}")
    return result


@router.delete("/{pet_id}", response_model=PetDeleted)
def delete_pet(
    pet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PetDeleted:
    pet = _get_pet_or_404(db, pet_id)
    ensure_self_or_admin(current_user, pet.user_id, message="Not authorized to delete this pet")

    snapshot = PetRead.model_validate(pet)
    db.delete(pet)
    db.commit()
    record_action(db, current_user.id, f"DELETE_PET {pet_id}")
    return PetDeleted(message="Pet deleted", pet=snapshot)
