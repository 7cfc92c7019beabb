# src/services/api/dependencies.py
"""
Dependency Injection для HTTP API.
"""

from __future__ import annotations

from src.core.auth import TelegramAuthService


# Синглтоны
_auth_service: TelegramAuthService | None = None


async def init_dependencies(
    bot_token: str,
    public_key: str,
    max_age: int,
) -> None:
    """Инициализировать зависимости при старте приложения."""
    global _auth_service
    _auth_service = TelegramAuthService(
        bot_token=bot_token,
        public_key=public_key,
        max_age=max_age,
    )


def get_auth_service() -> TelegramAuthService:
    """Получить сервис проверки initData."""
    if _auth_service is None:
        raise RuntimeError("TelegramAuthService не инициализирован. Вызовите init_dependencies()")
    return _auth_service


async def cleanup_dependencies() -> None:
    """Очистить ресурсы при остановке приложения."""
    global _auth_service
    _auth_service = None
