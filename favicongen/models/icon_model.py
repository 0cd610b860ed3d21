"""Модели данных генератора иконок.

Принципы:
- SRP: только структуры данных и простая арифметика над ними, без обработки пикселей.
- Чистый код: неизменяемость (`frozen=True`); буферы хранятся как `bytes`,
  поэтому варианты никогда не разделяют память с исходником.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping

import numpy as np
from PIL import Image

from favicongen.models.errors import ValidationError


class FitPolicy(str, Enum):
    """Как согласовать пропорции исходника с целевым прямоугольником."""

    COVER = "cover"  # заполнить и обрезать по центру
    CONTAIN = "contain"  # вписать и добить прозрачными полями


@dataclass(frozen=True)
class CanonicalImage:
    """Нормализованный RGBA8-буфер исходного изображения.

    Fields:
        width: Ширина, px.
        height: Высота, px.
        pixels: Пиксели RGBA построчно, `width * height * 4` байт.
        source_format: Формат исходника ("PNG", "JPEG", "SVG").
    """
    width: int
    height: int
    pixels: bytes
    source_format: str

    def __post_init__(self) -> None:
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(f"Ожидалось {expected} байт RGBA, получено {len(self.pixels)}")

    def to_pil(self) -> Image.Image:
        """Возвращает новую копию изображения PIL в режиме RGBA."""
        return Image.frombytes("RGBA", (self.width, self.height), self.pixels)

    def to_array(self) -> np.ndarray:
        """Возвращает новый изменяемый массив формы (height, width, 4)."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, 4).copy()

    @classmethod
    def from_pil(cls, image: Image.Image, source_format: str) -> "CanonicalImage":
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(width=rgba.width, height=rgba.height, pixels=rgba.tobytes(), source_format=source_format)


@dataclass(frozen=True)
class SizeSpec:
    """Строка таблицы размеров: имя варианта, целевой размер и правила обработки."""
    name: str
    width: int
    height: int
    fit: FitPolicy = FitPolicy.COVER
    round_corners: bool = True


@dataclass(frozen=True)
class RadiusPolicy:
    """Масштабирование радиуса скругления под целевой размер.

    Радиус `base_radius` задан для квадрата `reference_size`; для цели WxH он
    равен round(base_radius * min(W, H) / reference_size) с округлением половины
    вверх и ограничен сверху floor(min(W, H) / 2).
    """
    base_radius: int
    reference_size: int

    def __post_init__(self) -> None:
        if self.base_radius < 0:
            raise ValidationError(f"Радиус не может быть отрицательным: {self.base_radius}")
        if self.reference_size <= 0:
            raise ValidationError(f"Базовый размер должен быть > 0: {self.reference_size}")

    def scaled_radius(self, side: int) -> int:
        """Радиус для стороны `side` без ограничения половиной стороны."""
        # round-half-up в целых числах: floor(x + 1/2) = (2*a*b + c) // (2*c)
        return (2 * self.base_radius * side + self.reference_size) // (2 * self.reference_size)

    def effective_radius(self, width: int, height: int) -> int:
        side = min(width, height)
        return min(self.scaled_radius(side), side // 2)


@dataclass(frozen=True)
class IconVariant:
    """Готовый вариант иконки.

    Fields:
        spec: Строка таблицы размеров, по которой построен вариант.
        png: Закодированный PNG.
        pixels: Сырой RGBA-буфер того же изображения.
        radius: Фактически применённый радиус (0, если скругление пропущено).
    """
    spec: SizeSpec
    png: bytes
    pixels: bytes
    radius: int = 0

    @property
    def size(self) -> tuple[int, int]:
        return self.spec.width, self.spec.height


@dataclass(frozen=True)
class ContainerEntry:
    """Запись каталога ICO вместе с полезной нагрузкой."""
    width: int
    height: int
    data: bytes
    bit_depth: int = 32


@dataclass(frozen=True)
class AppMetadata:
    """Текстовые метаданные приложения. Ядро их не интерпретирует."""
    app_name: str = "My App"
    short_name: str = "App"
    theme_color: str = "#6366f1"


@dataclass(frozen=True)
class GenerationRequest:
    data: bytes
    mime_type: str
    radius: int
    metadata: AppMetadata = field(default_factory=AppMetadata)


@dataclass(frozen=True)
class IconBundle:
    """Полный набор результатов одного запроса.

    Fields:
        variants: Варианты по именам в порядке таблицы размеров.
        container: Байты ICO-контейнера.
        radius_policy: Политика радиуса, с которой строился набор.
        layout: Выходной путь -> имя варианта.
        container_paths: Пути, под которыми сохраняется один и тот же ICO.
    """
    variants: Mapping[str, IconVariant]
    container: bytes
    radius_policy: RadiusPolicy
    layout: Mapping[str, str]
    container_paths: tuple[str, ...]

    def files(self) -> Dict[str, bytes]:
        """Выходной путь -> байты файла (PNG и ICO)."""
        out: Dict[str, bytes] = {path: self.variants[name].png for path, name in self.layout.items()}
        for path in self.container_paths:
            out[path] = self.container
        return out
