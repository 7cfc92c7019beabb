# src/services/api/__init__.py
"""
HTTP API кальянного вишлиста.

Граница авторизации Mini App:
- initData берётся из заголовка X-Telegram-Init-Data или параметра initData
- любая ошибка проверки -> 401
- вид ошибки пишется в лог
"""
