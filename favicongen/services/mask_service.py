"""Скругление углов: обнуление альфы вне скруглённого прямоугольника.

Принципы:
- SRP: только геометрия маски; радиус приходит уже масштабированным и ограниченным.
- Чистый код: четыре независимых предиката по непересекающимся угловым квадратам
  вместо общей функции «расстояние до границы».

Граница жёсткая (без сглаживания): пиксель с dx² + dy² == r² остаётся непрозрачным.
Ограничение r <= floor(min(w, h) / 2) — ответственность вызывающего; при большем
радиусе угловые квадраты перекрываются, результат определён, но вряд ли полезен.
"""
from __future__ import annotations

import numpy as np
from PIL import Image

from favicongen.models.errors import ProcessingError


class MaskService:
    def corner_cutout(self, width: int, height: int, radius: int) -> np.ndarray:
        """
        Булева маска (height, width): True там, где альфа должна стать 0.
        """
        if radius < 0:
            raise ProcessingError(f"Отрицательный радиус: {radius}")
        r = int(radius)
        if r == 0:
            return np.zeros((height, width), dtype=bool)

        ys, xs = np.ogrid[0:height, 0:width]
        ys = ys.astype(np.int64)
        xs = xs.astype(np.int64)
        r2 = r * r

        left = xs < r
        right = xs >= width - r
        top = ys < r
        bottom = ys >= height - r

        # центры дуг: (r, r) слева/сверху и (width-r-1, height-r-1) справа/снизу
        dx_left = r - xs
        dx_right = xs - (width - r - 1)
        dy_top = r - ys
        dy_bottom = ys - (height - r - 1)

        top_left = top & left & (dx_left ** 2 + dy_top ** 2 > r2)
        top_right = top & right & (dx_right ** 2 + dy_top ** 2 > r2)
        bottom_left = bottom & left & (dx_left ** 2 + dy_bottom ** 2 > r2)
        bottom_right = bottom & right & (dx_right ** 2 + dy_bottom ** 2 > r2)
        return top_left | top_right | bottom_left | bottom_right

    def apply_rounded_corners(self, pixels: np.ndarray, radius: int) -> np.ndarray:
        """
        Возвращает копию RGBA-массива (height, width, 4) с нулевой альфой в срезанных углах.
        При radius == 0 возвращает вход без изменений.
        """
        if radius == 0:
            return pixels
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ProcessingError(f"Ожидался RGBA-массив (h, w, 4), получено {pixels.shape}")
        height, width = pixels.shape[:2]
        out = pixels.copy()
        out[..., 3][self.corner_cutout(width, height, radius)] = 0
        return out

    def apply_to_bytes(self, data: bytes, width: int, height: int, radius: int) -> bytes:
        """То же для плоского RGBA8-буфера."""
        if radius == 0:
            return data
        if len(data) != width * height * 4:
            raise ProcessingError(f"Размер буфера {len(data)} не соответствует {width}x{height} RGBA")
        arr = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 4)
        return self.apply_rounded_corners(arr, radius).tobytes()

    def apply_to_image(self, image: Image.Image, radius: int) -> Image.Image:
        """То же для изображения PIL; всегда возвращает новый объект."""
        rgba = image.convert("RGBA") if image.mode != "RGBA" else image.copy()
        if radius == 0:
            return rgba
        arr = np.asarray(rgba, dtype=np.uint8)
        return Image.fromarray(self.apply_rounded_corners(arr, radius))
