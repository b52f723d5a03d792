"""Statistics schemas."""
from pydantic import BaseModel


class AdoptedByCity(BaseModel):
    city: str
    adopted_count: int
