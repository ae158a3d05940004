"""
Postboard — Auth API Tests
============================
"""

import pytest

from postboard.security import decode_access_token

NEW_USER = {"username": "carol", "email": "Carol@Example.com", "password": "correct-horse"}


class TestRegister:

    @pytest.mark.asyncio
    async def test_register(self, test_client):
        response = await test_client.post("/api/auth/register", json=NEW_USER)
        assert response.status_code == 201
        assert response.json() == {"message": "You registered successfully, please log in"}

    @pytest.mark.asyncio
    async def test_duplicate_email_ignores_case(self, test_client):
        await test_client.post("/api/auth/register", json=NEW_USER)
        response = await test_client.post(
            "/api/auth/register", json={**NEW_USER, "email": "carol@example.com"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User already exists"

    @pytest.mark.asyncio
    async def test_short_password(self, test_client):
        response = await test_client.post(
            "/api/auth/register", json={**NEW_USER, "password": "short"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == (
            '"password" length must be at least 8 characters long'
        )

    @pytest.mark.asyncio
    async def test_malformed_email(self, test_client):
        response = await test_client.post(
            "/api/auth/register", json={**NEW_USER, "email": "not-an-email"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == '"email" has an invalid format'


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_usable_token(self, test_client, settings):
        await test_client.post("/api/auth/register", json=NEW_USER)

        response = await test_client.post(
            "/api/auth/login",
            json={"email": NEW_USER["email"], "password": NEW_USER["password"]},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "carol"
        assert body["is_admin"] is False

        identity = decode_access_token(body["token"], settings)
        assert str(identity.id) == body["id"]

        response = await test_client.post(
            "/api/posts",
            json={"title": "Hello", "description": "A sufficiently long description here"},
            headers={"Authorization": f"Bearer {body['token']}"},
        )
        assert response.status_code == 201
        assert response.json()["post"]["user"] == body["id"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client):
        await test_client.post("/api/auth/register", json=NEW_USER)
        response = await test_client.post(
            "/api/auth/login", json={"email": NEW_USER["email"], "password": "wrong-password"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_unknown_email(self, test_client):
        response = await test_client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "whatever1"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid email or password"
