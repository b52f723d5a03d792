"""Seed demo users and pets for local development."""
from __future__ import annotations

import random

from dotenv import load_dotenv

load_dotenv()

from petshelter import models  # noqa: E402
from petshelter.config import get_settings  # noqa: E402
from petshelter.db import create_all, get_sessionmaker  # noqa: E402
from petshelter.security import hash_password  # noqa: E402

NUM_USERS = 20
NUM_PETS = 40
CITIES = ["Cluj", "Bucharest", "Iasi", "Timisoara", "Brasov", "Sibiu"]
FIRST_NAMES = ["Ana", "Bianca", "Mihai", "Andrei", "Ioana", "Elena", "Radu", "Maria", "Vlad", "Dan"]
PET_NAMES = [
    "Bella", "Max", "Luna", "Charlie", "Milo", "Rocky", "Simba", "Daisy", "Toby", "Nala",
    "Maggie", "Willow", "Lucy", "Bailey", "Rosie", "Cooper", "Teddy", "Ollie", "Finn", "Leo",
]


def _image_for(species: models.PetSpecies, index: int) -> str:
    if species is models.PetSpecies.DOG:
        return f"https://placedog.net/300/200?id={index}"
    return f"https://cataas.com/cat?{index}"


def main() -> None:
    settings = get_settings()
    print(f"Using database: {settings.database_url}")

    create_all()
    session = get_sessionmaker()()
    rng = random.Random(42)
    try:
        admin = models.User(
            name="Shelter Admin",
            email="admin@example.com",
            phone="0700000000",
            city="Cluj",
            age=35,
            password_hash=hash_password("admin123"),
            role=models.UserRole.ADMIN,
        )
        users = [admin]
        for i in range(NUM_USERS):
            users.append(
                models.User(
                    name=f"{rng.choice(FIRST_NAMES)} {i}",
                    email=f"user{i}@example.com",
                    phone=f"07{rng.randrange(10**8):08d}",
                    city=rng.choice(CITIES),
                    age=rng.randint(18, 100),
                    password_hash=hash_password("password123"),
                )
            )
        session.add_all(users)
        session.flush()

        for i in range(NUM_PETS):
            species = rng.choice(list(models.PetSpecies))
            session.add(
                models.Pet(
                    name=rng.choice(PET_NAMES),
                    species=species,
                    age=rng.randint(1, 30),
                    status=rng.choice(list(models.PetStatus)),
                    image=_image_for(species, i),
                    user_id=rng.choice(users).id,
                )
            )
        session.commit()
        print(f"Inserted {len(users)} users and {NUM_PETS} pets. Admin login: admin@example.com / admin123")
    finally:
        session.close()


if __name__ == "__main__":
    main()
