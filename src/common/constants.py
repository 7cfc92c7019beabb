# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class InitDataErrorKind(str, Enum):
    """Виды ошибок проверки Telegram initData."""
    MISSING_REQUIRED_FIELDS = "missing_required_fields"
    MALFORMED_AUTH_DATE = "malformed_auth_date"
    STALE_AUTH_DATE = "stale_auth_date"
    INVALID_SIGNATURE = "invalid_signature"
    CRYPTO_FAILURE = "crypto_failure"
    INVALID_USER_PAYLOAD = "invalid_user_payload"


class VerificationMethod(str, Enum):
    """Способ проверки подписи initData."""
    ED25519 = "ed25519"
    HMAC_SHA256 = "hmac_sha256"


# Максимальный возраст auth_date (24 часа)
AUTH_DATE_MAX_AGE_SECONDS: int = 86400

# Ключ для вывода секрета из токена бота
WEBAPP_DATA_KEY: bytes = b"WebAppData"

# Публичные Ed25519 ключи Telegram для проверки сторонних Mini App
# https://docs.telegram-mini-apps.com/platform/init-data
TELEGRAM_PUBLIC_KEYS: dict[str, str] = {
    "production": "e7bf03a2fa4602af4580703d88dda5bb59f32ed8b02a56c187fe7d34caed242d",
    "test": "40055058a4ee38156a06562e52eece92a771bcd8346a8c4615cb7376eddf72ec",
}
