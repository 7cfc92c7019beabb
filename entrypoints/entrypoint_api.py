#!/usr/bin/env python3
"""
Entrypoint для HTTP API вишлиста.

Запуск:
    python entrypoints/entrypoint_api.py

Хост и порт берутся из config/config.json (API_HOST, API_PORT).
"""

import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(project_root))

import uvicorn

from src.config import settings


def main() -> None:
    """Запустить HTTP API."""
    uvicorn.run(
        "src.services.api.app:app",
        host=settings.api.API_HOST,
        port=settings.api.API_PORT,
        reload=settings.system.DEBUG,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
