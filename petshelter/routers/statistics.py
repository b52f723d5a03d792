"""Adoption statistics endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from petshelter.db import get_db
from petshelter.models.pet import Pet, PetStatus
from petshelter.models.user import User
from petshelter.schemas.statistics import AdoptedByCity

router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("/adopted-by-city", response_model=list[AdoptedByCity])
def adopted_by_city(db: Session = Depends(get_db)) -> list[AdoptedByCity]:
    """Number of adopted pets per owner city, busiest city first."""

    adopted_count = func.count(Pet.id).label("adopted_count")
    stmt = (
        select(User.city, adopted_count)
        .select_from(Pet)
        .join(User, Pet.user_id == User.id)
        .where(Pet.status == PetStatus.ADOPTED)
        .group_by(User.city)
        .order_by(adopted_count.desc(), User.city)
    )
    return [AdoptedByCity(city=city, adopted_count=count) for city, count in db.execute(stmt).all()]
