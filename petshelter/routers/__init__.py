"""API routers for the pet shelter backend."""
from fastapi import APIRouter

from . import auth, health, monitored_users, pets, statistics, users


def get_api_router() -> APIRouter:
    """Return the root API router."""

    api_router = APIRouter()
    api_router.include_router(health.router)
    api_router.include_router(auth.router)
    api_router.include_router(users.router)
    api_router.include_router(pets.router)
    api_router.include_router(statistics.router)
    api_router.include_router(monitored_users.router)
    return api_router
