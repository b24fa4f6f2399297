"""
API tests for the snippet endpoints.

Uses httpx against the ASGI app with a per-test SQLite database.
"""

import logging
from datetime import timedelta

import pytest
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from sqlalchemy import update

from copyit.core.rate_limit import ACTION_CREATE, ACTION_RETRIEVE, RateLimiter
from copyit.core.resources import get_rate_limiter
from copyit.db.models import Snippet, utcnow
from copyit.main import app
from copyit.middleware.logging import loggable_path
from copyit.services.path_generator import PathGenerator

ONE_MIB = 1024 * 1024


async def create(client, **body):
    return await client.post("/api/v1/snippets", json=body)


class TestCreateEndpoint:
    """Test POST /api/v1/snippets."""

    @pytest.mark.asyncio
    async def test_create_snippet(self, client):
        response = await create(client, content="hello world", ttl_seconds=300)

        assert response.status_code == 201
        data = response.json()
        assert set(data) == {"path", "url", "expires_at", "created_at"}
        assert data["url"].endswith(f"/{data['path']}")
        assert data["expires_at"].endswith("Z")
        assert data["created_at"] < data["expires_at"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"content": ""}, {"content": 42}, {"content": ["a"]}])
    async def test_invalid_content(self, client, body):
        response = await client.post("/api/v1/snippets", json=body)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        response = await client.post(
            "/api/v1/snippets",
            content=b"{not json",
            headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_content_too_large(self, client):
        response = await create(client, content="a" * (ONE_MIB + 1))
        assert response.status_code == 413

    @pytest.mark.asyncio
    async def test_garbage_ttl_uses_default(self, client):
        response = await create(client, content="hello", ttl_seconds="abc")
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_rate_limited(self, client):
        limiter = RateLimiter(
            FakeRedis(server=FakeServer(), decode_responses=True),
            limits={ACTION_CREATE: 2, ACTION_RETRIEVE: 120}
        )
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        headers = {"X-Forwarded-For": "198.51.100.1, 10.0.0.1"}
        statuses = [
            (await client.post("/api/v1/snippets", json={"content": "x"}, headers=headers)).status_code
            for _ in range(3)
        ]
        other = await client.post("/api/v1/snippets", json={"content": "x"},
                                  headers={"X-Forwarded-For": "198.51.100.2"})

        assert statuses == [201, 201, 429]
        assert other.status_code == 201

    @pytest.mark.asyncio
    async def test_path_exhaustion_is_internal_error(self, client, monkeypatch):
        monkeypatch.setattr(PathGenerator, "generate", lambda self: "nova-ridge-echo-quartz")
        assert (await create(client, content="first")).status_code == 201

        response = await create(client, content="second")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error"}
        assert "nova-ridge-echo-quartz" not in response.text


class TestRequestLogging:
    """Test the request log line written by the logging middleware."""

    @pytest.mark.parametrize("path, expected", [
        ("/", "/"),
        ("/health", "/health"),
        ("/api/v1/snippets", "/api/v1/snippets"),
        ("/nova-ridge-echo-quartz", "/{path}"),
    ])
    def test_loggable_path(self, path, expected):
        assert loggable_path(path) == expected

    @pytest.mark.asyncio
    async def test_snippet_paths_are_not_logged(self, client, caplog):
        caplog.set_level(logging.INFO, logger="copyit")
        path = (await create(client, content="secret", one_time=True)).json()["path"]

        await client.get(f"/{path}")

        messages = [r.getMessage() for r in caplog.records if r.name.startswith("copyit")]
        assert any(m.startswith("GET /{path} 200") for m in messages)
        assert any(m.startswith("POST /api/v1/snippets 201") for m in messages)
        assert not [m for m in messages if path in m]


class TestRetrieveEndpoint:
    """Test GET /{path}."""

    @pytest.mark.asyncio
    async def test_retrieve_raw_text(self, client):
        path = (await create(client, content="line one\nline two")).json()["path"]

        response = await client.get(f"/{path}")

        assert response.status_code == 200
        assert response.text == "line one\nline two"
        assert response.headers["content-type"].startswith("text/plain")
        assert "no-store" in response.headers["cache-control"]

    @pytest.mark.asyncio
    async def test_raw_query_and_curl_user_agent(self, client):
        path = (await create(client, content="echo hi")).json()["path"]

        with_raw = await client.get(f"/{path}", params={"raw": "1"})
        with_curl = await client.get(f"/{path}", headers={"User-Agent": "curl/8.5.0"})

        assert with_raw.text == with_curl.text == "echo hi"

    @pytest.mark.asyncio
    async def test_short_path(self, client):
        response = await client.get("/abc")
        assert response.status_code == 400
        assert response.text == "Invalid path\n"

    @pytest.mark.asyncio
    async def test_unknown_path(self, client):
        response = await client.get("/nova-ridge-echo-quartz")
        assert response.status_code == 404
        assert response.text == "Snippet not found or expired.\n"

    @pytest.mark.asyncio
    async def test_one_time_snippet(self, client):
        path = (await create(client, content="secret", one_time=True)).json()["path"]

        first = await client.get(f"/{path}")
        second = await client.get(f"/{path}")

        assert first.status_code == 200
        assert first.text == "secret"
        assert second.status_code == 410
        assert "secret" not in second.text

    @pytest.mark.asyncio
    async def test_retrieve_rate_limited(self, client):
        path = (await create(client, content="hello")).json()["path"]
        limiter = RateLimiter(
            FakeRedis(server=FakeServer(), decode_responses=True),
            limits={ACTION_CREATE: 30, ACTION_RETRIEVE: 1}
        )
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        assert (await client.get(f"/{path}")).status_code == 200
        limited = await client.get(f"/{path}")

        assert limited.status_code == 429
        assert limited.text == "Too many requests\n"

    @pytest.mark.asyncio
    async def test_long_path_is_looked_up(self, client):
        response = await client.get("/" + "a" * 200)
        assert response.status_code == 404
        assert response.text == "Snippet not found or expired.\n"

    @pytest.mark.asyncio
    async def test_path_with_trailing_space_is_looked_up(self, client):
        response = await client.get("/abc%20")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_expired_snippet_looks_like_unknown_path(self, client, session_maker):
        path = (await create(client, content="stale")).json()["path"]
        async with session_maker() as session:
            await session.execute(
                update(Snippet)
                .where(Snippet.path == path)
                .values(expires_at=utcnow() - timedelta(seconds=1))
            )
            await session.commit()

        expired = await client.get(f"/{path}")
        unknown = await client.get("/nova-ridge-echo-quartz")

        assert expired.status_code == unknown.status_code == 404
        assert expired.text == unknown.text



class TestHealthEndpoints:
    """Test service info and health routes."""

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    @pytest.mark.asyncio
    async def test_health(self, client, monkeypatch):
        async def reachable():
            return True

        monkeypatch.setattr("copyit.main.check_database", reachable)
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "ok"}

    @pytest.mark.asyncio
    async def test_health_database_unreachable(self, client, monkeypatch):
        async def unreachable():
            raise ConnectionError("database is down")

        monkeypatch.setattr("copyit.main.check_database", unreachable)
        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json() == {"status": "unhealthy", "database": "unreachable"}

