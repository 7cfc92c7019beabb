# src/services/__init__.py
"""
Сервисы приложения.

Сервисы:
- api: HTTP API вишлиста (FastAPI), авторизация через Telegram initData
"""

__all__: list[str] = []
