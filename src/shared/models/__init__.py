# src/shared/models/__init__.py
"""
Общие Pydantic-модели HTTP API.
"""

from src.shared.models.common import ApiError, ApiResponse, HealthStatus

__all__ = [
    "ApiError",
    "ApiResponse",
    "HealthStatus",
]
