# src/core/auth/init_data.py
"""
Разбор Telegram initData и построение data-check-string.
https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from urllib.parse import parse_qsl


def parse_init_data(raw: str) -> dict[str, str]:
    """
    Декодировать initData как application/x-www-form-urlencoded.

    Повторяющийся ключ перезаписывается последним значением.
    Никакой валидации здесь нет.
    """
    return dict(parse_qsl(raw or "", keep_blank_values=True))


def build_data_check_string(
    fields: Mapping[str, str],
    exclude: Iterable[str] = ("hash",),
) -> str:
    """
    Собрать data-check-string: пары key=value без исключённых ключей,
    отсортированные по ключу и разделённые '\\n'.
    """
    excluded = set(exclude)
    return "\n".join(
        f"{key}={fields[key]}" for key in sorted(fields) if key not in excluded
    )
