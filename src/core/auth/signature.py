# src/core/auth/signature.py
"""
Проверка подписи Telegram initData.

Два способа:
- HMAC-SHA256 по секрету из токена бота (собственная Mini App бота);
- Ed25519 по публичному ключу Telegram (сторонняя Mini App).

Способ выбирается по упорядоченному списку SIGNATURE_VERIFIERS:
первый, чьё поле присутствует в initData, побеждает.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import VerifyKey

from src.common.constants import WEBAPP_DATA_KEY, VerificationMethod
from src.common.logger import get_logger
from src.core.auth.errors import CryptoFailureError, InvalidSignatureError
from src.core.auth.init_data import build_data_check_string

logger = get_logger("auth")


@dataclass(frozen=True)
class SignatureCredentials:
    """Секреты, необходимые для проверки подписи."""
    bot_token: str
    public_key: str | None = None


# =============================================================================
# HMAC-SHA256
# =============================================================================

def derive_secret_key(bot_token: str) -> bytes:
    """secret_key = HMAC_SHA256(key="WebAppData", msg=bot_token)."""
    if not isinstance(bot_token, str) or not bot_token:
        raise CryptoFailureError("Токен бота не задан")
    try:
        return hmac.new(WEBAPP_DATA_KEY, bot_token.encode("utf-8"), hashlib.sha256).digest()
    except (TypeError, ValueError) as e:
        raise CryptoFailureError(f"Не удалось вычислить секретный ключ: {e}") from e


def calculate_hash(fields: Mapping[str, str], bot_token: str) -> str:
    """Вычислить hex-подпись initData (без поля hash)."""
    secret_key = derive_secret_key(bot_token)
    data_check_string = build_data_check_string(fields, exclude=("hash",))
    try:
        return hmac.new(secret_key, data_check_string.encode("utf-8"), hashlib.sha256).hexdigest()
    except (TypeError, ValueError) as e:
        raise CryptoFailureError(f"Ошибка вычисления HMAC: {e}") from e


def verify_hmac_sha256(fields: Mapping[str, str], bot_token: str) -> None:
    """
    Проверить поле hash.

    Raises:
        InvalidSignatureError: hash не совпал
        CryptoFailureError: проверку невозможно выполнить
    """
    received_hash = fields.get("hash") or ""
    calculated_hash = calculate_hash(fields, bot_token)

    matches = hmac.compare_digest(
        calculated_hash.encode("ascii"),
        received_hash.encode("utf-8"),
    )
    logger.debug(
        "Проверка HMAC-SHA256",
        extra={"extra_data": {
            "provided": received_hash[:16],
            "calculated": calculated_hash[:16],
            "matches": matches,
        }},
    )
    if not matches:
        raise InvalidSignatureError("Невалидный hash initData")


# =============================================================================
# ED25519
# =============================================================================

def _decode_signature(signature: str) -> bytes:
    """base64url без паддинга -> bytes."""
    try:
        return base64.urlsafe_b64decode(signature + "=" * (-len(signature) % 4))
    except (binascii.Error, ValueError) as e:
        raise InvalidSignatureError(f"Некорректная кодировка signature: {e}") from e


def _load_public_key(public_key_hex: str | None) -> VerifyKey:
    if not public_key_hex:
        raise CryptoFailureError("Не задан публичный ключ Telegram")
    try:
        return VerifyKey(bytes.fromhex(public_key_hex))
    except (ValueError, TypeError, CryptoError) as e:
        raise CryptoFailureError(f"Некорректный публичный ключ Telegram: {e}") from e


def verify_ed25519(fields: Mapping[str, str], public_key_hex: str | None) -> None:
    """
    Проверить поле signature (Ed25519).

    Подписывается data-check-string, из которой исключены hash и signature.

    Raises:
        InvalidSignatureError: подпись не прошла проверку
        CryptoFailureError: нет ключа или ошибка библиотеки
    """
    verify_key = _load_public_key(public_key_hex)

    signature = _decode_signature(fields.get("signature") or "")
    data_check_string = build_data_check_string(fields, exclude=("hash", "signature"))
    message = data_check_string.encode("utf-8")

    try:
        verify_key.verify(message, signature)
    except (BadSignatureError, ValueError) as e:
        # nacl ValueError: подпись неверной длины
        raise InvalidSignatureError("Невалидная подпись initData") from e
    except CryptoError as e:
        raise CryptoFailureError(f"Ошибка проверки Ed25519: {e}") from e


# =============================================================================
# ВЫБОР СПОСОБА ПРОВЕРКИ
# =============================================================================

@dataclass(frozen=True)
class SignatureVerifier:
    """Способ проверки: метод, поле-признак и функция проверки."""
    method: VerificationMethod
    field: str
    verify: Callable[[Mapping[str, str], SignatureCredentials], None]

    def applies_to(self, fields: Mapping[str, str]) -> bool:
        return bool(fields.get(self.field))


def _verify_ed25519(fields: Mapping[str, str], credentials: SignatureCredentials) -> None:
    verify_ed25519(fields, credentials.public_key)


def _verify_hmac_sha256(fields: Mapping[str, str], credentials: SignatureCredentials) -> None:
    verify_hmac_sha256(fields, credentials.bot_token)


# Порядок важен: signature (сторонние Mini App) проверяется раньше hash
SIGNATURE_VERIFIERS: tuple[SignatureVerifier, ...] = (
    SignatureVerifier(VerificationMethod.ED25519, "signature", _verify_ed25519),
    SignatureVerifier(VerificationMethod.HMAC_SHA256, "hash", _verify_hmac_sha256),
)


def select_verifier(
    fields: Mapping[str, str],
    verifiers: tuple[SignatureVerifier, ...] = SIGNATURE_VERIFIERS,
) -> SignatureVerifier | None:
    """Первый подходящий способ проверки или None."""
    for verifier in verifiers:
        if verifier.applies_to(fields):
            return verifier
    return None
