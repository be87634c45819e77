"""Tests for registration, login and the bearer token identity used by the car routes."""

import pytest

from carshop_api.core import security

AUTH_URL = "/api/v1/auth"


@pytest.fixture
def new_user():
    return {
        "username": "joana",
        "email": "joana@example.com",
        "password": "s3cret-pass",
        "full_name": "Joana Lima",
    }


async def register_and_login(client, user) -> str:
    response = await client.post(f"{AUTH_URL}/register", json=user)
    assert response.status_code == 201
    response = await client.post(
        f"{AUTH_URL}/login", json={"username": user["username"], "password": user["password"]}
    )
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.mark.asyncio
async def test_register_hides_password(anonymous_client, new_user):
    response = await anonymous_client.post(f"{AUTH_URL}/register", json=new_user)

    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "joana"
    assert body["is_active"] is True
    assert "password" not in body
    assert "hashed_password" not in body


@pytest.mark.asyncio
async def test_register_duplicate_username(anonymous_client, new_user):
    await anonymous_client.post(f"{AUTH_URL}/register", json=new_user)

    response = await anonymous_client.post(
        f"{AUTH_URL}/register", json={**new_user, "email": "other@example.com"}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_with_wrong_password(anonymous_client, new_user):
    await anonymous_client.post(f"{AUTH_URL}/register", json=new_user)

    response = await anonymous_client.post(
        f"{AUTH_URL}/login", json={"username": "joana", "password": "wrong"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_token_owner(anonymous_client, new_user):
    token = await register_and_login(anonymous_client, new_user)

    response = await anonymous_client.get(
        f"{AUTH_URL}/users/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    assert response.json()["username"] == "joana"


@pytest.mark.asyncio
async def test_car_created_with_token_belongs_to_token_owner(anonymous_client, new_user, car_payload):
    token = await register_and_login(anonymous_client, new_user)
    headers = {"Authorization": f"Bearer {token}"}
    me = (await anonymous_client.get(f"{AUTH_URL}/users/me", headers=headers)).json()

    response = await anonymous_client.post("/api/v1/cars/", json=car_payload, headers=headers)
    cars = (await anonymous_client.get("/api/v1/cars/", headers=headers)).json()

    assert response.status_code == 201
    assert cars[0]["created_user_id"] == me["id"]
    assert cars[0]["updated_user_id"] == me["id"]


@pytest.mark.asyncio
async def test_token_for_unknown_user_is_rejected(anonymous_client):
    token = security.create_access_token(subject=999)

    response = await anonymous_client.get("/api/v1/cars/", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_token_is_rejected(anonymous_client):
    response = await anonymous_client.get("/api/v1/cars/", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_ignores_client_role(anonymous_client, new_user):
    response = await anonymous_client.post(f"{AUTH_URL}/register", json={**new_user, "role": "admin"})

    assert response.status_code == 201
    assert response.json()["role"] == "staff"
