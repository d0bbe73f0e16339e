"""
Unit tests for the StreamHub API server (server.py).

Tests cover:
- Health check and root endpoints
- Error envelope shape for each failure kind
- Config validation warnings
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from config import (
    DEFAULT_ACCESS_SECRET,
    DEFAULT_REFRESH_SECRET,
    AuthConfig,
    Config,
    DatabaseConfig,
    ServerConfig,
)
from server import app

from conftest import API


# =============================================================================
# System Endpoint Tests
# =============================================================================

class TestSystemEndpoints:
    """Tests for /health and /."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "1.0.0"}

    def test_root_reports_api_prefix(self, client):
        data = client.get("/").json()
        assert data["service"] == "StreamHub API"
        assert data["apiPrefix"] == API

    @pytest.mark.asyncio
    async def test_health_check_async(self):
        """Test the health endpoint through the raw ASGI transport."""
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/health")
        assert response.status_code == 200


# =============================================================================
# Envelope Tests
# =============================================================================

class TestErrorEnvelope:
    """Tests that every failure is wrapped in the shared envelope."""

    def test_unauthorized_envelope(self, client):
        body = client.get(f"{API}/users/current-user").json()
        assert body == {
            "statusCode": 401,
            "data": None,
            "message": "Unauthorized request",
            "success": False,
            "errors": [],
        }

    def test_unknown_route_is_enveloped(self, client):
        response = client.get(f"{API}/nowhere")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_malformed_json_is_a_validation_error(self, client, make_user):
        alice = make_user("alice")
        response = client.post(
            f"{API}/playlists",
            content=b"{not json",
            headers={**alice.headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["statusCode"] == 400

    def test_client_errors_logged_as_warnings(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="server"):
            client.get(f"{API}/users/current-user")

        records = [r for r in caplog.records if r.name == "server" and "current-user" in r.getMessage()]
        assert records
        assert all(r.levelno == logging.WARNING for r in records)

    def test_success_envelope(self, client, make_user):
        alice = make_user("alice")
        body = client.get(f"{API}/users/current-user", headers=alice.headers).json()
        assert body["statusCode"] == 200
        assert body["success"] is True
        assert body["message"] == "Current user fetched successfully"


# =============================================================================
# Config Tests
# =============================================================================

class TestConfigValidation:
    """Tests for Config.validate warnings."""

    def test_default_secrets_warn_outside_debug(self):
        config = Config(
            auth=AuthConfig(
                access_token_secret=DEFAULT_ACCESS_SECRET,
                refresh_token_secret=DEFAULT_REFRESH_SECRET,
            ),
            server=ServerConfig(debug=False),
        )
        assert "Default token secrets in use in production mode" in config.validate()

    def test_identical_secrets_warn(self):
        config = Config(auth=AuthConfig(access_token_secret="same", refresh_token_secret="same"))
        assert "Access and refresh token secrets are identical" in config.validate()

    def test_postgres_url_is_normalized(self):
        database = DatabaseConfig(database_url="postgres://u:p@db/streamhub")
        assert database.url == "postgresql://u:p@db/streamhub"
        assert not database.is_sqlite
