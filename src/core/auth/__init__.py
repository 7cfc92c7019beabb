# src/core/auth/__init__.py
"""
Домен авторизации.
Проверка Telegram Mini App initData (HMAC-SHA256 / Ed25519).
"""

from src.core.auth.errors import InitDataError
from src.core.auth.init_data import build_data_check_string, parse_init_data
from src.core.auth.models import InitDataValidationResult, TelegramUser
from src.core.auth.service import TelegramAuthService, validate_init_data
from src.core.auth.signature import select_verifier, verify_ed25519, verify_hmac_sha256

__all__ = [
    "InitDataError",
    "InitDataValidationResult",
    "TelegramAuthService",
    "TelegramUser",
    "build_data_check_string",
    "parse_init_data",
    "select_verifier",
    "validate_init_data",
    "verify_ed25519",
    "verify_hmac_sha256",
]
