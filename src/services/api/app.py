# src/services/api/app.py
"""
FastAPI приложение HTTP API.

Endpoints:
- GET  /health                 - проверка здоровья
- GET  /api/v1/auth/me         - текущий пользователь Telegram (по initData)
- POST /api/v1/auth/telegram   - проверка initData из тела запроса
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.common.logger import log_error, log_info, log_warning, setup_logging
from src.config import settings
from src.core.auth import InitDataValidationResult, TelegramAuthService, TelegramUser
from src.services.api.dependencies import (
    cleanup_dependencies,
    get_auth_service,
    init_dependencies,
)
from src.shared.models.common import ApiResponse, HealthStatus


SERVICE_NAME = "api"


# === REQUEST MODELS ===

class TelegramAuthRequest(BaseModel):
    """Запрос проверки initData."""
    initData: str = Field("", description="Сырая строка Telegram.WebApp.initData")


# === AUTH DEPENDENCY ===

async def _log_rejection(result: InitDataValidationResult, path: str) -> None:
    await log_warning(
        "initData отклонена",
        logger_name=SERVICE_NAME,
        extra={
            "path": path,
            "kind": result.error_kind.value if result.error_kind else None,
            "method": result.method.value if result.method else None,
            "error": result.error,
        },
    )


async def get_current_user(
    request: Request,
    service: Annotated[TelegramAuthService, Depends(get_auth_service)],
    x_telegram_init_data: Annotated[str | None, Header(alias="X-Telegram-Init-Data")] = None,
    init_data: Annotated[str | None, Query(alias="initData")] = None,
) -> TelegramUser:
    """
    Проверить initData из заголовка X-Telegram-Init-Data
    (или параметра initData) и вернуть пользователя.

    Пользователь также сохраняется в request.state.telegram_user.
    """
    raw = x_telegram_init_data or init_data
    if not raw:
        await log_warning(
            "Нет Telegram initData в запросе",
            logger_name=SERVICE_NAME,
            extra={"path": request.url.path},
        )
        raise HTTPException(
            status_code=401,
            detail={"code": "MISSING_INIT_DATA", "message": "Отсутствует Telegram initData"},
        )

    if not service.is_configured:
        await log_error("BOT_TOKEN не настроен", logger_name=SERVICE_NAME)
        raise HTTPException(
            status_code=500,
            detail={"code": "SERVER_CONFIG_ERROR", "message": "Ошибка конфигурации сервера"},
        )

    result = service.authenticate(raw)
    if not result.valid or result.user is None:
        await _log_rejection(result, request.url.path)
        raise HTTPException(
            status_code=401,
            detail={"code": "INVALID_INIT_DATA", "message": result.error or "Невалидная initData"},
        )

    request.state.telegram_user = result.user
    return result.user


# === LIFESPAN ===

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    setup_logging()

    await init_dependencies(
        bot_token=settings.telegram.BOT_TOKEN,
        public_key=settings.telegram.TELEGRAM_PUBLIC_KEY,
        max_age=settings.telegram.INIT_DATA_MAX_AGE,
    )
    await log_info(
        "API запущен",
        logger_name=SERVICE_NAME,
        extra={"environment": settings.system.ENVIRONMENT},
    )

    yield

    await cleanup_dependencies()


# === APP ===

app = FastAPI(
    title="Hookah Wishlist API",
    description="API вишлиста табаков для кальяна. Авторизация через Telegram initData.",
    version=settings.system.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter(prefix=settings.api.API_PREFIX)


# === HEALTH CHECK ===

@app.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    """Проверка здоровья сервиса."""
    return HealthStatus(
        service=SERVICE_NAME,
        status="healthy",
        version=settings.system.VERSION,
    )


# === AUTH ===

@router.get("/auth/me", response_model=TelegramUser, tags=["Auth"])
async def get_me(
    user: Annotated[TelegramUser, Depends(get_current_user)],
) -> TelegramUser:
    """Текущий пользователь Telegram."""
    return user


@router.post("/auth/telegram", tags=["Auth"])
async def authenticate_telegram(
    payload: TelegramAuthRequest,
    request: Request,
    service: Annotated[TelegramAuthService, Depends(get_auth_service)],
) -> JSONResponse:
    """
    Проверить initData из тела запроса.

    200 -> {"success": true, "data": {"user": ...}}
    400 -> пустой initData
    401 -> initData не прошла проверку
    500 -> токен бота не настроен
    """
    if not payload.initData:
        return JSONResponse(
            status_code=400,
            content=ApiResponse.fail("MISSING_INIT_DATA", "initData обязателен").model_dump(),
        )

    if not service.is_configured:
        await log_error("BOT_TOKEN не настроен", logger_name=SERVICE_NAME)
        return JSONResponse(
            status_code=500,
            content=ApiResponse.fail("SERVER_CONFIG_ERROR", "Ошибка конфигурации сервера").model_dump(),
        )

    result = service.authenticate(payload.initData)
    if not result.valid or result.user is None:
        await _log_rejection(result, request.url.path)
        return JSONResponse(
            status_code=401,
            content=ApiResponse.fail(
                "INVALID_INIT_DATA", result.error or "Невалидная initData"
            ).model_dump(),
        )

    await log_info(
        "Пользователь Telegram авторизован",
        logger_name=SERVICE_NAME,
        extra={"user_id": result.user.id, "method": result.method.value if result.method else None},
    )
    return JSONResponse(
        status_code=200,
        content=ApiResponse.ok({"user": result.user.model_dump(mode="json")}).model_dump(mode="json"),
    )


app.include_router(router)
