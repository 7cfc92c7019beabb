# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlencode

import pytest
from nacl.signing import SigningKey

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("BOT_TOKEN", "123:ABC")
os.environ.setdefault("LOG_LEVEL", "DEBUG")


# =============================================================================
# ЭТАЛОННАЯ ПОДПИСЬ INITDATA (независимо от src)
# =============================================================================

def _data_check_string(fields: dict[str, str], exclude: tuple[str, ...]) -> str:
    return "\n".join(f"{k}={v}" for k, v in sorted(fields.items()) if k not in exclude)


def reference_hmac_hash(fields: dict[str, str], bot_token: str) -> str:
    """Подпись так, как её считает Telegram для собственной Mini App."""
    secret = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    return hmac.new(
        secret, _data_check_string(fields, ("hash",)).encode(), hashlib.sha256
    ).hexdigest()


# =============================================================================
# ФИКСТУРЫ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def bot_token() -> str:
    """Токен тестового бота."""
    return "123:ABC"


@pytest.fixture
def now() -> int:
    """Фиксированное «текущее» время."""
    return 1_700_000_000


@pytest.fixture
def sample_user() -> dict[str, Any]:
    """Пример user из initData."""
    return {
        "id": 385787313,
        "first_name": "Данил",
        "last_name": "",
        "username": "hookah_fan",
        "language_code": "en",
        "allows_write_to_pm": True,
    }


def _base_fields(user: dict[str, Any] | str | None, auth_date: int | str) -> dict[str, str]:
    fields: dict[str, str] = {"auth_date": str(auth_date)}
    if user is not None:
        fields["user"] = user if isinstance(user, str) else json.dumps(
            user, separators=(",", ":"), ensure_ascii=False
        )
    return fields


@pytest.fixture
def make_init_data(bot_token: str, now: int) -> Callable[..., str]:
    """
    Фабрика initData с подписью HMAC-SHA256.

    Пример: make_init_data(user={...}, auth_date=now - 10, extra={"query_id": "AAA"})
    """

    def _make(
        user: dict[str, Any] | str | None = None,
        auth_date: int | str | None = None,
        extra: dict[str, str] | None = None,
        token: str | None = None,
    ) -> str:
        if user is None:
            user = {"id": 1, "first_name": "A"}
        fields = _base_fields(user, now if auth_date is None else auth_date)
        fields.update(extra or {})
        fields["hash"] = reference_hmac_hash(fields, token or bot_token)
        return urlencode(fields)

    return _make


@pytest.fixture
def signing_key() -> SigningKey:
    """Ключ, которым «Telegram» подписывает initData в тестах."""
    return SigningKey.generate()


@pytest.fixture
def public_key_hex(signing_key: SigningKey) -> str:
    """Публичный ключ в hex, как он хранится в конфиге."""
    return signing_key.verify_key.encode().hex()


@pytest.fixture
def make_ed25519_init_data(signing_key: SigningKey, now: int) -> Callable[..., str]:
    """Фабрика initData с подписью Ed25519 (сторонняя Mini App)."""

    def _make(
        user: dict[str, Any] | str | None = None,
        auth_date: int | str | None = None,
        extra: dict[str, str] | None = None,
    ) -> str:
        if user is None:
            user = {"id": 1, "first_name": "A"}
        fields = _base_fields(user, now if auth_date is None else auth_date)
        fields.update(extra or {})
        message = _data_check_string(fields, ("hash", "signature"))
        signature = signing_key.sign(message.encode()).signature
        fields["signature"] = base64.urlsafe_b64encode(signature).decode().rstrip("=")
        return urlencode(fields)

    return _make


@pytest.fixture
def hmac_signer() -> Callable[[dict[str, str], str], str]:
    """Эталонная функция подписи HMAC-SHA256 для ручной сборки initData."""
    return reference_hmac_hash
