"""
Postboard — Application Shell Tests
=====================================

What:  Health endpoint, startup lifespan, timeout middleware and the
       global error envelope.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from postboard.exceptions import DatabaseError
from postboard.main import create_app
from postboard.middleware.timeout import RequestTimeoutMiddleware
from postboard.services.post_service import post_service


def _unreachable_database():
    database = MagicMock()
    database.ping = AsyncMock(side_effect=ConnectionRefusedError("connection refused"))
    database.dispose = AsyncMock()
    return database


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_unhealthy_database(self, settings):
        app = create_app(settings=settings, database=_unreachable_database())
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_fails_when_database_unreachable(self, settings):
        database = _unreachable_database()
        app = create_app(settings=settings, database=database)

        with pytest.raises(ConnectionRefusedError):
            async with app.router.lifespan_context(app):
                pass
        database.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_startup_and_shutdown(self, settings, database):
        database.dispose = AsyncMock(wraps=database.dispose)
        app = create_app(settings=settings, database=database)

        async with app.router.lifespan_context(app):
            database.dispose.assert_not_awaited()
        database.dispose.assert_awaited_once()


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_database_error_is_redacted(self, test_client):
        failure = DatabaseError(
            message="Error counting posts",
            context={"error_type": "OperationalError", "dsn": "postgresql://secret"},
        )
        with patch.object(post_service, "count_posts", AsyncMock(side_effect=failure)):
            response = await test_client.get("/api/posts/count")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert body["message"] == "Error counting posts"
        assert body["details"] is None
        assert "secret" not in response.text

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client, make_user):
        _, headers = await make_user()
        response = await test_client.post(
            "/api/posts",
            content=b"{not json",
            headers={**headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Request body is not valid JSON"


class TestRequestTimeout:

    @pytest.mark.asyncio
    async def test_slow_request_gets_504(self):
        app = FastAPI()
        app.add_middleware(RequestTimeoutMiddleware, timeout=0.05)

        @app.get("/slow")
        async def slow():
            await asyncio.sleep(1)
            return {"done": True}

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/slow")

        assert response.status_code == 504
        body = response.json()
        assert body["error"] == "timeout"
        assert body["details"] == {"timeout": 0.05}

    @pytest.mark.asyncio
    async def test_fast_request_passes(self):
        app = FastAPI()
        app.add_middleware(RequestTimeoutMiddleware, timeout=1.0)

        @app.get("/fast")
        async def fast():
            return {"done": True}

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/fast")

        assert response.status_code == 200
