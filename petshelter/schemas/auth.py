"""Authentication schemas."""
from pydantic import BaseModel, EmailStr

from petshelter.models.user import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenRead(BaseModel):
    token: str
    role: UserRole
    user_id: int


class MessageRead(BaseModel):
    message: str
