import logging

import pytest
from sqlalchemy import select

from petshelter.models import ActionLogEntry, Pet, PetSpecies, PetStatus
from petshelter.services import action_log
from petshelter.services.errors import StoreUnavailable

PET = {"name": "Bella", "species": "Dog", "age": 3, "image": "https://placedog.net/300/200?id=1"}


def _actions(db_session, user_id: int) -> list[str]:
    stmt = select(ActionLogEntry.action).where(ActionLogEntry.user_id == user_id).order_by(ActionLogEntry.id)
    return list(db_session.scalars(stmt).all())


def _add_pet(db_session, owner, **overrides) -> Pet:
    values = {
        "name": "Milo",
        "species": PetSpecies.CAT,
        "age": 2,
        "status": PetStatus.AVAILABLE,
        "image": "https://cataas.com/cat?1",
    }
    values.update(overrides)
    pet = Pet(user_id=owner.id if owner else None, **values)
    db_session.add(pet)
    db_session.commit()
    return pet


@pytest.mark.anyio("asyncio")
async def test_create_pet_sets_owner_and_logs_action(client, db_session, regular_user, user_headers):
    response = await client.post("/pets", json=PET, headers=user_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == regular_user.id
    assert body["status"] == "Available"
    assert _actions(db_session, regular_user.id) == [f"CREATE_PET {body['id']}"]


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    "override",
    [{"age": 0}, {"age": 31}, {"species": "Parrot"}, {"status": "Lost"}, {"name": ""}],
)
async def test_create_pet_validates_payload(client, user_headers, override):
    response = await client.post("/pets", json={**PET, **override}, headers=user_headers)

    assert response.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_create_pet_requires_token(client):
    response = await client.post("/pets", json=PET)

    assert response.status_code == 401


@pytest.mark.anyio("asyncio")
async def test_get_pet_includes_owner(client, db_session, regular_user):
    pet = _add_pet(db_session, regular_user)

    response = await client.get(f"/pets/{pet.id}")

    assert response.status_code == 200
    owner = response.json()["owner"]
    assert owner["id"] == regular_user.id
    assert owner["name"] == regular_user.name
    assert owner["city"] == regular_user.city


@pytest.mark.anyio("asyncio")
async def test_get_unknown_pet_returns_404(client):
    response = await client.get("/pets/999999")

    assert response.status_code == 404
    assert response.json()["error"] == {"code": "PET_NOT_FOUND", "message": "Pet not found"}


@pytest.mark.anyio("asyncio")
async def test_owner_can_update_pet(client, db_session, regular_user, user_headers):
    pet = _add_pet(db_session, regular_user)

    response = await client.patch(f"/pets/{pet.id}", json={"status": "Adopted", "age": 4}, headers=user_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "Adopted"
    assert response.json()["age"] == 4
    assert _actions(db_session, regular_user.id) == [f"UPDATE_PET {pet.id}"]


@pytest.mark.anyio("asyncio")
async def test_update_rejects_null_fields(client, db_session, regular_user, user_headers):
    pet = _add_pet(db_session, regular_user)

    response = await client.patch(f"/pets/{pet.id}", json={"name": None}, headers=user_headers)

    assert response.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_non_owner_cannot_update_or_delete_pet(client, db_session, make_user, auth_headers_for):
    owner = make_user(name="Owner")
    stranger = make_user(name="Stranger")
    pet = _add_pet(db_session, owner)
    headers = auth_headers_for(stranger)

    update = await client.patch(f"/pets/{pet.id}", json={"age": 9}, headers=headers)
    delete = await client.delete(f"/pets/{pet.id}", headers=headers)

    assert update.status_code == 403
    assert delete.status_code == 403
    assert update.json()["error"]["code"] == "FORBIDDEN"
    assert _actions(db_session, stranger.id) == []


@pytest.mark.anyio("asyncio")
async def test_admin_can_update_any_pet(client, db_session, regular_user, admin_user, admin_headers):
    pet = _add_pet(db_session, regular_user)

    response = await client.patch(f"/pets/{pet.id}", json={"name": "Rex"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Rex"
    assert _actions(db_session, admin_user.id) == [f"UPDATE_PET {pet.id}"]


@pytest.mark.anyio("asyncio")
async def test_delete_pet_returns_snapshot(client, db_session, regular_user, user_headers):
    pet = _add_pet(db_session, regular_user, name="Luna")
    pet_id = pet.id

    response = await client.delete(f"/pets/{pet_id}", headers=user_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Pet deleted"
    assert body["pet"]["id"] == pet_id
    assert body["pet"]["name"] == "Luna"
    assert db_session.get(Pet, pet_id) is None
    assert _actions(db_session, regular_user.id) == [f"DELETE_PET {pet_id}"]


@pytest.mark.anyio("asyncio")
async def test_delete_unknown_pet_returns_404(client, user_headers):
    response = await client.delete("/pets/999999", headers=user_headers)

    assert response.status_code == 404


@pytest.mark.anyio("asyncio")
async def test_list_pets_filters(client, db_session, regular_user, make_user, user_headers):
    other = make_user(name="Other")
    _add_pet(db_session, regular_user, name="Bella", species=PetSpecies.DOG, age=3)
    _add_pet(db_session, regular_user, name="Bellatrix", species=PetSpecies.CAT, age=3, status=PetStatus.ADOPTED)
    _add_pet(db_session, other, name="Rocky", species=PetSpecies.DOG, age=7)

    async def names(**params) -> list[str]:
        response = await client.get("/pets", params=params, headers=user_headers)
        assert response.status_code == 200
        return sorted(pet["name"] for pet in response.json())

    assert await names(name="bell") == ["Bella", "Bellatrix"]
    assert await names(species="Dog") == ["Bella", "Rocky"]
    assert await names(status="Adopted") == ["Bellatrix"]
    assert await names(age="3") == ["Bella", "Bellatrix"]
    assert await names(age="three") == ["Bella", "Bellatrix", "Rocky"]
    assert await names(user_id=other.id) == ["Rocky"]


@pytest.mark.anyio("asyncio")
async def test_list_pets_sorting_and_pagination(client, db_session, regular_user, user_headers):
    for name, age in [("Charlie", 5), ("Ada", 9), ("Bo", 1)]:
        _add_pet(db_session, regular_user, name=name, age=age)

    by_age = await client.get("/pets", params={"sort": "age"}, headers=user_headers)
    by_age_desc = await client.get("/pets", params={"sort": "age_desc"}, headers=user_headers)
    by_name_page = await client.get("/pets", params={"sort": "name", "page": 2, "limit": 2}, headers=user_headers)

    assert [pet["age"] for pet in by_age.json()] == [1, 5, 9]
    assert [pet["age"] for pet in by_age_desc.json()] == [9, 5, 1]
    assert [pet["name"] for pet in by_name_page.json()] == ["Charlie"]


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("params", [{"sort": "weight"}, {"page": 0}, {"limit": 101}])
async def test_list_pets_rejects_bad_query(client, user_headers, params):
    response = await client.get("/pets", params=params, headers=user_headers)

    assert response.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_action_log_failure_does_not_break_request(client, db_session, regular_user, user_headers, monkeypatch, caplog):
    caplog.set_level(logging.ERROR, logger="petshelter.services.action_log")

    def _unavailable(*args, **kwargs):
        raise StoreUnavailable("database is locked")

    monkeypatch.setattr(action_log, "append_action", _unavailable)

    response = await client.post("/pets", json=PET, headers=user_headers)

    assert response.status_code == 201
    assert db_session.get(Pet, response.json()["id"]) is not None
    assert _actions(db_session, regular_user.id) == []
    assert "Action log append failed" in caplog.text
