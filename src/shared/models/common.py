# src/shared/models/common.py
"""
Общие модели ответов HTTP API.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


class ApiError(BaseModel):
    """Описание ошибки в ответе API."""

    code: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """Конверт ответа: {success, data, error}."""

    success: bool
    data: T | None = None
    error: ApiError | None = None

    @classmethod
    def ok(cls, data: Any) -> "ApiResponse[Any]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, code: str, message: str) -> "ApiResponse[Any]":
        return cls(success=False, error=ApiError(code=code, message=message))


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"  # healthy, degraded, unhealthy
    version: str | None = None
