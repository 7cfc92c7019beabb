# src/shared/__init__.py
"""
Общий код между компонентами (API, бот, Mini App).

Модули:
- models: общие Pydantic-модели ответов
"""

__all__: list[str] = []
