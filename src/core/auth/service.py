# src/core/auth/service.py
"""
Валидация Telegram Mini App initData.

Порядок проверок линейный:
разбор -> обязательные поля -> свежесть auth_date -> подпись -> user.
validate_init_data никогда не бросает исключений: любая ошибка
превращается в InitDataValidationResult(valid=False, ...).
"""

from __future__ import annotations

import json
import re
import time
from collections.abc import Callable, Mapping

from pydantic import ValidationError

from src.common.constants import AUTH_DATE_MAX_AGE_SECONDS, InitDataErrorKind
from src.common.logger import get_logger
from src.core.auth.errors import (
    InitDataError,
    InvalidUserPayloadError,
    MalformedAuthDateError,
    MissingRequiredFieldsError,
    StaleAuthDateError,
)
from src.core.auth.init_data import parse_init_data
from src.core.auth.models import InitDataValidationResult, TelegramUser
from src.core.auth.signature import SignatureCredentials, select_verifier

logger = get_logger("auth")

# Только ASCII-цифры: без знака, пробелов и "_"
_AUTH_DATE_RE = re.compile(r"[0-9]+")


def check_required_fields(fields: Mapping[str, str]) -> None:
    """Нужны auth_date и хотя бы одно из hash / signature."""
    has_signature = bool(fields.get("hash") or fields.get("signature"))
    if not has_signature or not fields.get("auth_date"):
        raise MissingRequiredFieldsError(
            "Отсутствуют обязательные поля: hash/signature или auth_date"
        )


def validate_auth_date(
    auth_date: str,
    now: float | None = None,
    max_age: int = AUTH_DATE_MAX_AGE_SECONDS,
) -> int:
    """
    Проверить свежесть auth_date.

    Граница включительная: возраст ровно max_age допустим.
    auth_date из будущего не отклоняется (проверка односторонняя).

    Returns:
        auth_date как Unix timestamp
    """
    if not isinstance(auth_date, str) or not _AUTH_DATE_RE.fullmatch(auth_date):
        raise MalformedAuthDateError(f"Некорректный формат auth_date: {auth_date!r}")
    auth_timestamp = int(auth_date, 10)

    current = int(time.time() if now is None else now)
    age = current - auth_timestamp
    if age > max_age:
        raise StaleAuthDateError(
            f"auth_date устарел: возраст {age} с, допустимо не более {max_age} с"
        )
    return auth_timestamp


def parse_user_payload(raw_user: str | None) -> TelegramUser:
    """Разобрать JSON поля user; id и first_name обязательны."""
    if not raw_user:
        raise InvalidUserPayloadError("Отсутствует user в initData")

    try:
        payload = json.loads(raw_user)
    except json.JSONDecodeError as e:
        raise InvalidUserPayloadError(f"Ошибка разбора user: {e}") from e

    if not isinstance(payload, dict):
        raise InvalidUserPayloadError("Поле user должно быть JSON-объектом")
    if not payload.get("id") or not payload.get("first_name"):
        raise InvalidUserPayloadError("В user отсутствуют обязательные поля id или first_name")

    try:
        return TelegramUser.model_validate(payload)
    except ValidationError as e:
        raise InvalidUserPayloadError(f"Некорректные данные user: {e}") from e


def validate_init_data(
    raw: str,
    bot_token: str,
    *,
    now: float | None = None,
    public_key: str | None = None,
    max_age: int = AUTH_DATE_MAX_AGE_SECONDS,
) -> InitDataValidationResult:
    """
    Полная проверка initData.

    Args:
        raw: URL-encoded строка Telegram.WebApp.initData
        bot_token: Токен бота (для HMAC-SHA256 и ID бота для Ed25519)
        now: Текущее время (Unix timestamp), по умолчанию time.time()
        public_key: Публичный Ed25519 ключ Telegram (hex)
        max_age: Максимальный возраст auth_date в секундах

    Returns:
        InitDataValidationResult; исключения наружу не выходят
    """
    method = None
    try:
        fields = parse_init_data(raw)
        logger.debug(
            "Разбор initData",
            extra={"extra_data": {
                "keys": sorted(fields),
                "has_hash": "hash" in fields,
                "has_signature": "signature" in fields,
            }},
        )

        check_required_fields(fields)
        validate_auth_date(fields["auth_date"], now=now, max_age=max_age)

        verifier = select_verifier(fields)
        # check_required_fields гарантирует наличие hash или signature
        method = verifier.method
        logger.debug(
            "Выбран способ проверки подписи",
            extra={"extra_data": {"method": method.value}},
        )
        verifier.verify(fields, SignatureCredentials(bot_token=bot_token, public_key=public_key))

        user = parse_user_payload(fields.get("user"))
    except InitDataError as e:
        logger.warning(
            "initData не прошла проверку",
            extra={"extra_data": {
                "kind": e.kind.value,
                "error": e.message,
                "method": method.value if method else None,
            }},
        )
        return InitDataValidationResult.failure(e.message, e.kind, method)
    except Exception as e:
        logger.error(
            "Непредвиденная ошибка проверки initData",
            extra={"extra_data": {"kind": InitDataErrorKind.CRYPTO_FAILURE.value}},
            exc_info=True,
        )
        return InitDataValidationResult.failure(
            f"Ошибка проверки initData: {e}", InitDataErrorKind.CRYPTO_FAILURE, method
        )

    logger.info(
        "initData валидна",
        extra={"extra_data": {"user_id": user.id, "method": method.value}},
    )
    return InitDataValidationResult.success(user, method)


class TelegramAuthService:
    """
    Сервис авторизации пользователей Mini App.
    Хранит секреты из конфига и источник времени.
    """

    def __init__(
        self,
        bot_token: str | None = None,
        public_key: str | None = None,
        max_age: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            bot_token: Токен бота (берётся из конфига если None)
            public_key: Публичный Ed25519 ключ Telegram (из конфига если None)
            max_age: Максимальный возраст auth_date (из конфига если None)
            clock: Источник текущего времени
        """
        if bot_token is None or public_key is None or max_age is None:
            from src.config import settings
            bot_token = settings.telegram.BOT_TOKEN if bot_token is None else bot_token
            public_key = settings.telegram.TELEGRAM_PUBLIC_KEY if public_key is None else public_key
            max_age = settings.telegram.INIT_DATA_MAX_AGE if max_age is None else max_age

        self._bot_token = bot_token
        self._public_key = public_key
        self._max_age = max_age
        self._clock = clock

    @property
    def is_configured(self) -> bool:
        """Задан ли токен бота."""
        return bool(self._bot_token)

    def authenticate(self, raw: str, now: float | None = None) -> InitDataValidationResult:
        """Проверить initData текущими секретами."""
        if not self.is_configured:
            return InitDataValidationResult.failure(
                "Токен бота не настроен", InitDataErrorKind.CRYPTO_FAILURE
            )
        return validate_init_data(
            raw,
            self._bot_token,
            now=self._clock() if now is None else now,
            public_key=self._public_key,
            max_age=self._max_age,
        )
