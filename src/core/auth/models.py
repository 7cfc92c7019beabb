# src/core/auth/models.py
"""
Модели данных авторизации Telegram Mini App.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.common.constants import InitDataErrorKind, VerificationMethod


class TelegramUser(BaseModel):
    """Пользователь из поля user в initData."""

    # Telegram присылает и другие поля (is_premium, photo_url, ...)
    model_config = ConfigDict(extra="allow")

    id: int = Field(..., gt=0, description="Telegram ID пользователя")
    first_name: str = Field(..., min_length=1, description="Имя")
    last_name: Optional[str] = Field(None, description="Фамилия")
    username: Optional[str] = Field(None, description="Username в Telegram")
    language_code: Optional[str] = Field(None, description="Код языка клиента")
    is_bot: Optional[bool] = Field(None, description="Является ли ботом")


class InitDataValidationResult(BaseModel):
    """
    Результат проверки initData.

    valid=True  -> user заполнен;
    valid=False -> error и error_kind заполнены.
    method показывает, каким способом проверялась подпись (если до этого дошло).
    """

    valid: bool
    user: Optional[TelegramUser] = None
    error: Optional[str] = None
    error_kind: Optional[InitDataErrorKind] = None
    method: Optional[VerificationMethod] = None

    @classmethod
    def success(cls, user: TelegramUser, method: VerificationMethod) -> "InitDataValidationResult":
        return cls(valid=True, user=user, method=method)

    @classmethod
    def failure(
        cls,
        error: str,
        kind: InitDataErrorKind,
        method: VerificationMethod | None = None,
    ) -> "InitDataValidationResult":
        return cls(valid=False, error=error, error_kind=kind, method=method)
