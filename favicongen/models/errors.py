"""Ошибки генератора иконок.

Каждый вид ошибки фатален для всего запроса: частичного результата не бывает.
"""
from __future__ import annotations


class FaviconError(Exception):
    """Базовая ошибка генерации набора иконок."""


class ValidationError(FaviconError):
    """Неверный входной запрос (тип файла, размер, радиус). Показывается пользователю как есть."""


class DecodeError(FaviconError):
    """Повреждённое или неподдерживаемое изображение."""


class ProcessingError(FaviconError):
    """Сбой ресайза или маскирования (например, вырожденные размеры)."""


class EncodeError(FaviconError):
    """Нарушен инвариант контейнера ICO. Означает внутреннюю ошибку, а не плохой ввод."""
