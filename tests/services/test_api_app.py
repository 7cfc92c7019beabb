# tests/services/test_api_app.py
"""
Тесты HTTP API (FastAPI): health, /auth/me, /auth/telegram.
"""

import pytest
from fastapi.testclient import TestClient

from src.common.constants import VerificationMethod
from src.core.auth import TelegramAuthService
from src.services.api import dependencies
from src.services.api.app import app
from src.services.api.dependencies import (
    cleanup_dependencies,
    get_auth_service,
    init_dependencies,
)


@pytest.fixture
def auth_service(bot_token, public_key_hex, now):
    return TelegramAuthService(
        bot_token=bot_token,
        public_key=public_key_hex,
        max_age=86400,
        clock=lambda: now,
    )


@pytest.fixture
def client(auth_service):
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client():
    app.dependency_overrides[get_auth_service] = lambda: TelegramAuthService(
        bot_token="", public_key="", max_age=86400
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    """Тесты /health."""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "service": "api",
            "status": "healthy",
            "version": "1.0.0",
        }


class TestAuthMe:
    """Тесты GET /api/v1/auth/me."""

    def test_header(self, client, make_init_data, sample_user):
        response = client.get(
            "/api/v1/auth/me",
            headers={"X-Telegram-Init-Data": make_init_data(user=sample_user)},
        )

        assert response.status_code == 200
        assert response.json()["id"] == sample_user["id"]
        assert response.json()["username"] == "hookah_fan"

    def test_query_param(self, client, make_init_data):
        response = client.get("/api/v1/auth/me", params={"initData": make_init_data()})

        assert response.status_code == 200
        assert response.json()["first_name"] == "A"

    def test_ed25519_header(self, client, make_ed25519_init_data):
        response = client.get(
            "/api/v1/auth/me",
            headers={"X-Telegram-Init-Data": make_ed25519_init_data()},
        )

        assert response.status_code == 200
        assert response.json()["id"] == 1

    def test_missing_init_data(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "MISSING_INIT_DATA"

    def test_stale_init_data(self, client, make_init_data, now):
        response = client.get(
            "/api/v1/auth/me",
            headers={"X-Telegram-Init-Data": make_init_data(auth_date=now - 86401)},
        )

        assert response.status_code == 401
        detail = response.json()["detail"]
        assert detail["code"] == "INVALID_INIT_DATA"
        assert "auth_date" in detail["message"]

    def test_wrong_token(self, client, make_init_data):
        response = client.get(
            "/api/v1/auth/me",
            headers={"X-Telegram-Init-Data": make_init_data(token="999:OTHER")},
        )

        assert response.status_code == 401

    def test_not_configured(self, unconfigured_client, make_init_data):
        response = unconfigured_client.get(
            "/api/v1/auth/me",
            headers={"X-Telegram-Init-Data": make_init_data()},
        )

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "SERVER_CONFIG_ERROR"


class TestAuthTelegram:
    """Тесты POST /api/v1/auth/telegram."""

    def test_valid(self, client, make_init_data, sample_user):
        response = client.post(
            "/api/v1/auth/telegram",
            json={"initData": make_init_data(user=sample_user)},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["error"] is None
        assert body["data"]["user"]["id"] == sample_user["id"]
        assert body["data"]["user"]["first_name"] == "Данил"

    def test_empty_init_data(self, client):
        response = client.post("/api/v1/auth/telegram", json={"initData": ""})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "MISSING_INIT_DATA"

    def test_missing_body_field(self, client):
        response = client.post("/api/v1/auth/telegram", json={})

        assert response.status_code == 400

    def test_invalid_signature(self, client, make_init_data):
        raw = make_init_data()
        prefix, received = raw.rsplit("hash=", 1)
        tampered = f"{prefix}hash={'0' * len(received)}"

        response = client.post("/api/v1/auth/telegram", json={"initData": tampered})

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "INVALID_INIT_DATA"

    def test_not_configured(self, unconfigured_client, make_init_data):
        response = unconfigured_client.post(
            "/api/v1/auth/telegram",
            json={"initData": make_init_data()},
        )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "SERVER_CONFIG_ERROR"


class TestDependencies:
    """Тесты DI контейнера API."""

    @pytest.mark.asyncio
    async def test_get_before_init_raises(self):
        await cleanup_dependencies()

        with pytest.raises(RuntimeError):
            get_auth_service()

    @pytest.mark.asyncio
    async def test_init_and_cleanup(self, bot_token, public_key_hex, make_ed25519_init_data, now):
        await init_dependencies(bot_token=bot_token, public_key=public_key_hex, max_age=86400)
        try:
            service = get_auth_service()
            assert service is dependencies._auth_service
            assert service.is_configured is True

            result = service.authenticate(make_ed25519_init_data(), now=now)
            assert result.valid is True
            assert result.method is VerificationMethod.ED25519
        finally:
            await cleanup_dependencies()

        assert dependencies._auth_service is None
