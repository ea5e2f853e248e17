"""
Inkpress Backend - Application Wiring Tests
============================================

What we test:
    ✅ Health endpoint reports a reachable database
    ✅ Security headers and X-Request-ID on every response
    ✅ CORS admits the configured origin with credentials, and only that origin
    ✅ Error bodies share one format
    ✅ Production check rejects the default signing secret
"""

import pytest

from inkpress.config import DEFAULT_JWT_SECRET, Settings
from inkpress.middleware.security_headers import DEFAULT_SECURITY_HEADERS


@pytest.mark.asyncio
async def test_health(test_client):
    response = await test_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"


@pytest.mark.asyncio
async def test_security_headers(test_client):
    response = await test_client.get("/post")

    for name, value in DEFAULT_SECURITY_HEADERS.items():
        assert response.headers[name] == value
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_is_echoed(test_client):
    response = await test_client.get("/profile", headers={"X-Request-ID": "abc12345"})

    assert response.headers["X-Request-ID"] == "abc12345"
    assert response.json()["request_id"] == "abc12345"


@pytest.mark.asyncio
async def test_error_body_format(test_client):
    response = await test_client.get("/profile")

    body = response.json()
    assert body["error"] == "unauthorized"
    assert body["message"] == "Unauthorized: Token missing"
    assert "request_id" in body


@pytest.mark.asyncio
async def test_cors_allows_configured_origin(test_client):
    response = await test_client.options(
        "/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert response.headers["access-control-allow-credentials"] == "true"


@pytest.mark.asyncio
async def test_cors_rejects_other_origin(test_client):
    response = await test_client.get("/post", headers={"Origin": "http://evil.example"})

    assert "access-control-allow-origin" not in response.headers


class TestSettings:

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://localhost:3000, https://blog.example.com")
        assert settings.cors_origins_list == ["http://localhost:3000", "https://blog.example.com"]

    def test_default_secret_rejected_for_production(self):
        with pytest.raises(ValueError):
            Settings(jwt_secret=DEFAULT_JWT_SECRET).validate_required_for_production()

    def test_custom_secret_accepted(self):
        Settings(jwt_secret="a-real-secret").validate_required_for_production()
