"""
Postboard — Comments API Tests
================================

What we test:
    ✅ Comment creation copies the author's username
    ✅ Unknown post → 404
    ✅ Listing is admin-only and populates the author
    ✅ Edit is author-only; delete allows author or admin
"""

import uuid

import pytest


async def _comment(client, headers, post_id, text="First!"):
    response = await client.post(
        "/api/comments", json={"post_id": post_id, "text": text}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateComment:

    @pytest.mark.asyncio
    async def test_create_stores_username(self, test_client, make_user, make_post):
        author, headers = await make_user(username="alice")
        post = await make_post(headers)

        comment = await _comment(test_client, headers, post["id"])
        assert comment["username"] == "alice"
        assert comment["user_id"] == str(author.id)
        assert comment["post_id"] == post["id"]

    @pytest.mark.asyncio
    async def test_unknown_post(self, test_client, make_user):
        _, headers = await make_user()
        response = await test_client.post(
            "/api/comments", json={"post_id": str(uuid.uuid4()), "text": "Hi"}, headers=headers
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Post not found"

    @pytest.mark.asyncio
    async def test_empty_text(self, test_client, make_user, make_post):
        _, headers = await make_user()
        post = await make_post(headers)
        response = await test_client.post(
            "/api/comments", json={"post_id": post["id"], "text": "   "}, headers=headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == '"text" length must be at least 1 characters long'

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client):
        response = await test_client.post(
            "/api/comments", json={"post_id": str(uuid.uuid4()), "text": "Hi"}
        )
        assert response.status_code == 401


class TestListComments:

    @pytest.mark.asyncio
    async def test_admin_sees_authors(self, test_client, make_user, make_post):
        author, headers = await make_user(username="bob")
        _, admin_headers = await make_user(is_admin=True)
        post = await make_post(headers)
        await _comment(test_client, headers, post["id"])

        response = await test_client.get("/api/comments", headers=admin_headers)
        assert response.status_code == 200
        comments = response.json()
        assert len(comments) == 1
        assert comments[0]["user"]["id"] == str(author.id)
        assert "password" not in comments[0]["user"]

    @pytest.mark.asyncio
    async def test_non_admin_refused(self, test_client, make_user):
        _, headers = await make_user()
        response = await test_client.get("/api/comments", headers=headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Not allowed, only admin"


class TestEditAndDeleteComment:

    @pytest.mark.asyncio
    async def test_author_edits(self, test_client, make_user, make_post):
        _, headers = await make_user()
        post = await make_post(headers)
        comment = await _comment(test_client, headers, post["id"])

        response = await test_client.put(
            f"/api/comments/{comment['id']}", json={"text": "Edited"}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["text"] == "Edited"

    @pytest.mark.asyncio
    async def test_admin_cannot_edit(self, test_client, make_user, make_post):
        _, headers = await make_user()
        _, admin_headers = await make_user(is_admin=True)
        post = await make_post(headers)
        comment = await _comment(test_client, headers, post["id"])

        response = await test_client.put(
            f"/api/comments/{comment['id']}", json={"text": "Edited"}, headers=admin_headers
        )
        assert response.status_code == 403
        assert response.json()["message"] == (
            "Access denied, only the author of the comment can edit it"
        )

    @pytest.mark.asyncio
    async def test_admin_deletes(self, test_client, make_user, make_post):
        _, headers = await make_user()
        _, admin_headers = await make_user(is_admin=True)
        post = await make_post(headers)
        comment = await _comment(test_client, headers, post["id"])

        response = await test_client.delete(f"/api/comments/{comment['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Comment has been deleted"}

        detail = (await test_client.get(f"/api/posts/{post['id']}")).json()
        assert detail["comments"] == []

    @pytest.mark.asyncio
    async def test_stranger_cannot_delete(self, test_client, make_user, make_post):
        _, headers = await make_user()
        _, other_headers = await make_user()
        post = await make_post(headers)
        comment = await _comment(test_client, headers, post["id"])

        response = await test_client.delete(f"/api/comments/{comment['id']}", headers=other_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_comment(self, test_client, make_user):
        _, headers = await make_user()
        response = await test_client.delete(f"/api/comments/{uuid.uuid4()}", headers=headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Comment not found"
