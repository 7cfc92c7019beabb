# src/core/__init__.py
"""
Доменный слой (Core Domain).
Чистая бизнес-логика, независимая от инфраструктуры.
"""

from src.core.auth import InitDataValidationResult, TelegramAuthService, TelegramUser

__all__ = [
    "InitDataValidationResult",
    "TelegramAuthService",
    "TelegramUser",
]
