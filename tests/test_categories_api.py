"""
Postboard — Categories API Tests
==================================
"""

import uuid

import pytest


class TestCategories:

    @pytest.mark.asyncio
    async def test_admin_creates_and_anyone_lists(self, test_client, make_user):
        _, admin_headers = await make_user(is_admin=True)

        for title in ("sports", "music"):
            response = await test_client.post(
                "/api/categories", json={"title": title}, headers=admin_headers
            )
            assert response.status_code == 201
            assert response.json()["title"] == title

        response = await test_client.get("/api/categories")
        assert response.status_code == 200
        assert [c["title"] for c in response.json()] == ["sports", "music"]

    @pytest.mark.asyncio
    async def test_duplicate_title(self, test_client, make_user):
        _, admin_headers = await make_user(is_admin=True)
        await test_client.post("/api/categories", json={"title": "sports"}, headers=admin_headers)

        response = await test_client.post(
            "/api/categories", json={"title": "sports"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Category already exists"

    @pytest.mark.asyncio
    async def test_non_admin_cannot_create(self, test_client, make_user):
        _, headers = await make_user()
        response = await test_client.post(
            "/api/categories", json={"title": "sports"}, headers=headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete(self, test_client, make_user):
        _, admin_headers = await make_user(is_admin=True)
        created = (
            await test_client.post(
                "/api/categories", json={"title": "sports"}, headers=admin_headers
            )
        ).json()

        response = await test_client.delete(
            f"/api/categories/{created['id']}", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json() == {
            "message": "Category has been deleted successfully",
            "categoryId": created["id"],
        }
        assert (await test_client.get("/api/categories")).json() == []

    @pytest.mark.asyncio
    async def test_delete_missing(self, test_client, make_user):
        _, admin_headers = await make_user(is_admin=True)
        response = await test_client.delete(
            f"/api/categories/{uuid.uuid4()}", headers=admin_headers
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Category not found"

    @pytest.mark.asyncio
    async def test_deleted_admin_cannot_create(self, test_client, make_user):
        admin, admin_headers = await make_user(is_admin=True)
        response = await test_client.delete(
            f"/api/users/profile/{admin.id}", headers=admin_headers
        )
        assert response.status_code == 200

        response = await test_client.post(
            "/api/categories", json={"title": "sports"}, headers=admin_headers
        )
        assert response.status_code == 401
        assert response.json()["message"] == "User not found, access denied"
        assert (await test_client.get("/api/categories")).json() == []
