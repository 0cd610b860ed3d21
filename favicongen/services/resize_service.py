from __future__ import annotations

from typing import Tuple

from PIL import Image, ImageOps

from favicongen.models.errors import ProcessingError
from favicongen.models.icon_model import FitPolicy

TRANSPARENT = (0, 0, 0, 0)


def contained_size(source_size: Tuple[int, int], width: int, height: int) -> Tuple[int, int]:
    """Размер источника, равномерно вписанного в width x height.

    Каждая сторона не меньше 1 px: очень вытянутый источник даёт полосу в пиксель,
    а не пустое изображение.
    """
    src_w, src_h = source_size
    ratio_src = src_w / src_h
    ratio_dst = width / height
    if ratio_src > ratio_dst:
        return width, max(1, round(src_h / src_w * width))
    if ratio_src < ratio_dst:
        return max(1, round(src_w / src_h * height)), height
    return width, height


class ResizeService:
    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self._resample = resample

    def resize(self, image: Image.Image, width: int, height: int, fit: FitPolicy) -> Image.Image:
        """
        Масштабирует RGBA-изображение ровно до width x height.

        COVER: равномерное масштабирование с перекрытием цели и обрезкой излишка по центру.
        CONTAIN: равномерное вписывание, остаток добивается прозрачными пикселями по центру.
        Чистая функция: исходное изображение не меняется, результат — новый объект.
        """
        if width <= 0 or height <= 0:
            raise ProcessingError(f"Недопустимый целевой размер: {width}x{height}")
        if image.width == 0 or image.height == 0:
            raise ProcessingError(f"Вырожденное исходное изображение: {image.width}x{image.height}")

        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        size = (width, height)
        if fit is FitPolicy.COVER:
            out = ImageOps.fit(rgba, size, method=self._resample, centering=(0.5, 0.5))
        elif fit is FitPolicy.CONTAIN:
            out = self._pad(rgba, width, height)
        else:
            raise ProcessingError(f"Неизвестная политика вписывания: {fit!r}")

        if out.size != size:
            raise ProcessingError(f"Ресайз вернул {out.size[0]}x{out.size[1]} вместо {width}x{height}")
        return out if out.mode == "RGBA" else out.convert("RGBA")

    def content_box(self, source_size: Tuple[int, int], width: int, height: int) -> Tuple[int, int, int, int]:
        """
        Прямоугольник (left, top, right, bottom), который занимает содержимое при CONTAIN.
        Всё вне него — прозрачные поля.
        """
        new_w, new_h = contained_size(source_size, width, height)
        left = round((width - new_w) * 0.5)
        top = round((height - new_h) * 0.5)
        return left, top, left + new_w, top + new_h

    def _pad(self, rgba: Image.Image, width: int, height: int) -> Image.Image:
        left, top, right, bottom = self.content_box(rgba.size, width, height)
        inner = rgba.resize((right - left, bottom - top), resample=self._resample)
        out = Image.new("RGBA", (width, height), TRANSPARENT)
        out.paste(inner, (left, top))
        return out
