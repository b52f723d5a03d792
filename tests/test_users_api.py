import pytest
from sqlalchemy import select

from petshelter.models import ActionLogEntry, Pet, PetSpecies, PetStatus, User

NEW_USER = {
    "name": "Radu Ionescu",
    "email": "radu@example.com",
    "phone": "0722000111",
    "city": "Iasi",
    "age": 41,
    "password": "s3cret!",
}


def _actions(db_session, user_id: int) -> list[str]:
    stmt = select(ActionLogEntry.action).where(ActionLogEntry.user_id == user_id).order_by(ActionLogEntry.id)
    return list(db_session.scalars(stmt).all())


@pytest.mark.anyio("asyncio")
async def test_list_users_filters_and_sorts(client, make_user):
    make_user(name="Zoe", city="Cluj", age=25)
    make_user(name="adam", city="Brasov", age=60)
    make_user(name="Mara", city="cluj-napoca", age=25)

    by_city = await client.get("/users", params={"city": "CLUJ", "sort": "name"})
    by_age = await client.get("/users", params={"age": "25", "sort": "name"})
    ignored_age = await client.get("/users", params={"age": "old"})
    sorted_by_age = await client.get("/users", params={"sort": "age"})

    assert [user["name"] for user in by_city.json()] == ["Mara", "Zoe"]
    assert [user["name"] for user in by_age.json()] == ["Mara", "Zoe"]
    assert len(ignored_age.json()) == 3
    assert [user["age"] for user in sorted_by_age.json()] == [25, 25, 60]
    assert "password_hash" not in by_city.json()[0]


@pytest.mark.anyio("asyncio")
async def test_list_users_rejects_unknown_sort(client):
    response = await client.get("/users", params={"sort": "email"})

    assert response.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_get_user_and_404(client, regular_user):
    found = await client.get(f"/users/{regular_user.id}")
    missing = await client.get("/users/999999")

    assert found.status_code == 200
    assert found.json()["email"] == regular_user.email
    assert found.json()["role"] == "Regular"
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "USER_NOT_FOUND"


@pytest.mark.anyio("asyncio")
async def test_list_user_pets(client, db_session, regular_user):
    db_session.add_all(
        [
            Pet(name="Toby", species=PetSpecies.DOG, age=4, status=PetStatus.ADOPTED, image="a.png", user_id=regular_user.id),
            Pet(name="Nala", species=PetSpecies.CAT, age=2, status=PetStatus.AVAILABLE, image="b.png", user_id=None),
        ]
    )
    db_session.commit()

    response = await client.get(f"/users/{regular_user.id}/pets")

    assert response.status_code == 200
    assert [pet["name"] for pet in response.json()] == ["Toby"]


@pytest.mark.anyio("asyncio")
async def test_user_can_update_self(client, db_session, regular_user, user_headers):
    response = await client.patch(
        f"/users/{regular_user.id}", json={"city": "Sibiu", "email": "NEW@Example.com"}, headers=user_headers
    )

    assert response.status_code == 200
    assert response.json()["city"] == "Sibiu"
    assert response.json()["email"] == "new@example.com"
    assert _actions(db_session, regular_user.id) == [f"UPDATE_USER {regular_user.id}"]


@pytest.mark.anyio("asyncio")
async def test_user_cannot_update_someone_else(client, make_user, user_headers):
    other = make_user(name="Other")

    response = await client.patch(f"/users/{other.id}", json={"city": "Sibiu"}, headers=user_headers)

    assert response.status_code == 403


@pytest.mark.anyio("asyncio")
async def test_update_rejects_taken_email(client, make_user, regular_user, user_headers):
    other = make_user(name="Other")

    response = await client.patch(f"/users/{regular_user.id}", json={"email": other.email}, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EMAIL_IN_USE"


@pytest.mark.anyio("asyncio")
async def test_admin_can_update_any_user(client, regular_user, admin_user, admin_headers, db_session):
    response = await client.patch(f"/users/{regular_user.id}", json={"age": 55}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["age"] == 55
    assert _actions(db_session, admin_user.id) == [f"UPDATE_USER {regular_user.id}"]


@pytest.mark.anyio("asyncio")
async def test_delete_user_orphans_pets(client, db_session, regular_user, user_headers):
    pet = Pet(name="Daisy", species=PetSpecies.DOG, age=6, status=PetStatus.ADOPTED, image="d.png", user_id=regular_user.id)
    db_session.add(pet)
    db_session.commit()
    user_id = regular_user.id

    response = await client.delete(f"/users/{user_id}", headers=user_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert db_session.get(User, user_id) is None
    db_session.refresh(pet)
    assert pet.user_id is None
    assert _actions(db_session, user_id) == [f"DELETE_USER {user_id}"]


@pytest.mark.anyio("asyncio")
async def test_regular_user_cannot_delete_others(client, make_user, user_headers):
    other = make_user(name="Other")

    response = await client.delete(f"/users/{other.id}", headers=user_headers)

    assert response.status_code == 403


@pytest.mark.anyio("asyncio")
async def test_admin_creates_user_with_role(client, db_session, admin_user, admin_headers):
    response = await client.post("/users", json={**NEW_USER, "role": "Admin"}, headers=admin_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "Admin"
    assert body["email"] == "radu@example.com"
    assert _actions(db_session, admin_user.id) == [f"CREATE_USER {body['id']}"]


@pytest.mark.anyio("asyncio")
async def test_regular_user_cannot_create_users(client, user_headers):
    response = await client.post("/users", json=NEW_USER, headers=user_headers)

    assert response.status_code == 403
