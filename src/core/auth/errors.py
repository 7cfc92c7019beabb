# src/core/auth/errors.py
"""
Ошибки проверки Telegram initData.
Каждый класс соответствует одному виду ошибки (InitDataErrorKind).
"""

from __future__ import annotations

from src.common.constants import InitDataErrorKind


class InitDataError(Exception):
    """Базовая ошибка валидации initData."""
    kind: InitDataErrorKind = InitDataErrorKind.CRYPTO_FAILURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingRequiredFieldsError(InitDataError):
    """В initData нет hash/signature или auth_date."""
    kind = InitDataErrorKind.MISSING_REQUIRED_FIELDS


class MalformedAuthDateError(InitDataError):
    """auth_date не является целым числом."""
    kind = InitDataErrorKind.MALFORMED_AUTH_DATE


class StaleAuthDateError(InitDataError):
    """auth_date старше допустимого возраста."""
    kind = InitDataErrorKind.STALE_AUTH_DATE


class InvalidSignatureError(InitDataError):
    """Подпись или hash не совпали."""
    kind = InitDataErrorKind.INVALID_SIGNATURE


class CryptoFailureError(InitDataError):
    """Проверку невозможно выполнить: нет ключа, битый токен, ошибка криптобиблиотеки."""
    kind = InitDataErrorKind.CRYPTO_FAILURE


class InvalidUserPayloadError(InitDataError):
    """Поле user отсутствует, не является JSON или не содержит id/first_name."""
    kind = InitDataErrorKind.INVALID_USER_PAYLOAD
