from datetime import timedelta

import pytest

from app.utils.security import create_access_token


@pytest.mark.asyncio
async def test_register_returns_token_and_user(async_client, register_user):
    body = await register_user("alice")

    assert body["token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["role"] == "user"
    assert body["user"]["is_active"] is True
    assert "hashed_password" not in body["user"]


@pytest.mark.asyncio
async def test_register_rejects_duplicates(async_client, register_user):
    await register_user("alice")

    same_email = await async_client.post(
        "/api/auth/register",
        json={
            "first_name": "A",
            "last_name": "B",
            "username": "other",
            "email": "ALICE@example.com",
            "password": "secret123",
        },
    )
    same_username = await async_client.post(
        "/api/auth/register",
        json={
            "first_name": "A",
            "last_name": "B",
            "username": "alice",
            "email": "new@example.com",
            "password": "secret123",
        },
    )

    assert same_email.status_code == 400
    assert same_email.json()["detail"] == "Email already registered"
    assert same_username.status_code == 400
    assert same_username.json()["detail"] == "Username already taken"


@pytest.mark.asyncio
async def test_register_validation_errors_are_400(async_client):
    response = await async_client.post(
        "/api/auth/register",
        json={"first_name": "A", "username": "a!", "email": "nope", "password": "1"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed"
    fields = {error.split(":")[0] for error in body["errors"]}
    assert {"last_name", "username", "email", "password"} <= fields


@pytest.mark.asyncio
async def test_login(async_client, register_user):
    await register_user("bob", password="hunter22")

    ok = await async_client.post(
        "/api/auth/login", json={"email": "bob@example.com", "password": "hunter22"}
    )
    wrong = await async_client.post(
        "/api/auth/login", json={"email": "bob@example.com", "password": "nope-nope"}
    )
    unknown = await async_client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "hunter22"}
    )

    assert ok.status_code == 200
    assert ok.json()["user"]["username"] == "bob"
    assert ok.json()["token"]
    assert wrong.status_code == 400
    assert wrong.json()["detail"] == "Invalid credentials"
    assert unknown.status_code == 400


@pytest.mark.asyncio
async def test_me_requires_valid_token(async_client, register_user, auth_headers):
    body = await register_user("carol")

    me = await async_client.get("/api/auth/me", headers=auth_headers(body["token"]))
    missing = await async_client.get("/api/auth/me")
    garbage = await async_client.get("/api/auth/me", headers=auth_headers("not-a-jwt"))
    expired_token = create_access_token(body["user"]["id"], timedelta(minutes=-5))
    expired = await async_client.get("/api/auth/me", headers=auth_headers(expired_token))

    assert me.status_code == 200
    assert me.json()["user"]["id"] == body["user"]["id"]
    assert missing.status_code == 401
    assert missing.headers["www-authenticate"] == "Bearer"
    assert garbage.status_code == 401
    assert expired.status_code == 401
    assert expired.json()["detail"] == "Token has expired"


@pytest.mark.asyncio
async def test_update_profile(async_client, register_user, auth_headers):
    await register_user("taken")
    body = await register_user("dave")
    headers = auth_headers(body["token"])

    updated = await async_client.put(
        "/api/auth/profile",
        json={"first_name": "David", "avatar": "https://img.example.com/d.png"},
        headers=headers,
    )
    conflict = await async_client.put(
        "/api/auth/profile", json={"username": "taken"}, headers=headers
    )

    assert updated.status_code == 200
    assert updated.json()["user"]["first_name"] == "David"
    assert updated.json()["user"]["avatar"] == "https://img.example.com/d.png"
    assert updated.json()["user"]["username"] == "dave"
    assert conflict.status_code == 400
    assert conflict.json()["detail"] == "Username already taken"


@pytest.mark.asyncio
async def test_change_password(async_client, register_user, auth_headers):
    body = await register_user("erin", password="original1")
    headers = auth_headers(body["token"])

    wrong = await async_client.put(
        "/api/auth/password",
        json={"current_password": "bad-guess", "new_password": "changed1"},
        headers=headers,
    )
    ok = await async_client.put(
        "/api/auth/password",
        json={"current_password": "original1", "new_password": "changed1"},
        headers=headers,
    )
    login = await async_client.post(
        "/api/auth/login", json={"email": "erin@example.com", "password": "changed1"}
    )

    assert wrong.status_code == 400
    assert wrong.json()["detail"] == "Current password is incorrect"
    assert ok.status_code == 200
    assert ok.json() == {"message": "Password updated successfully"}
    assert login.status_code == 200
