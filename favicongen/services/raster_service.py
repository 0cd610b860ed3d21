"""Декодирование исходника в канонический RGBA-буфер.

Принципы:
- SRP: класс отвечает только за декодирование и нормализацию в RGBA.
- OCP: новый формат — отдельный метод `_decode_*`, остальной конвейер не меняется.
"""
from __future__ import annotations

import functools
import io
import logging

from PIL import Image, UnidentifiedImageError

from favicongen import config
from favicongen.models.errors import DecodeError
from favicongen.models.icon_model import CanonicalImage

logger = logging.getLogger(__name__)


class RasterService:
    def __init__(self, svg_canvas: int = config.SVG_CANVAS, svg_dpi: int = config.SVG_DPI) -> None:
        self._svg_canvas = svg_canvas
        self._svg_dpi = svg_dpi

    def normalize(self, data: bytes, mime_type: str) -> CanonicalImage:
        """Декодирует байты исходника в `CanonicalImage`.

        Args:
            data: Содержимое файла.
            mime_type: Заявленный тип (`image/png`, `image/jpeg`, `image/svg+xml`).

        Returns:
            `CanonicalImage` в RGBA8; при отсутствии альфа-канала он добавляется
            полностью непрозрачным.

        Raises:
            DecodeError: если данные повреждены или формат не поддерживается.
        """
        if mime_type == config.MIME_SVG:
            image = self._decode_svg(data)
            source_format = "SVG"
        else:
            image = self._decode_raster(data)
            source_format = image.format or "UNKNOWN"

        canonical = CanonicalImage.from_pil(image, source_format=source_format)
        if canonical.width == 0 or canonical.height == 0:
            raise DecodeError("Изображение имеет нулевой размер")
        logger.info("Decoded %s source: %dx%d", source_format, canonical.width, canonical.height)
        return canonical

    def _decode_raster(self, data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
            # open() читает только заголовок; битые данные всплывают на load()
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Файл не является изображением: {exc}") from exc
        except (OSError, SyntaxError, ValueError) as exc:
            raise DecodeError(f"Изображение повреждено: {exc}") from exc
        return image

    def _decode_svg(self, data: bytes) -> Image.Image:
        """Растеризует SVG с вписыванием в квадрат `svg_canvas` с сохранением пропорций.

        Пропорции берутся из width/height/viewBox корня, документ рендерится один раз
        сразу в размер холста.
        """
        try:
            import cairosvg
            from cairosvg.helpers import node_format
            from cairosvg.parser import Tree
        except (ImportError, OSError) as exc:
            raise DecodeError(f"Растеризация SVG недоступна: {exc}") from exc

        render = functools.partial(cairosvg.svg2png, bytestring=data, dpi=self._svg_dpi)
        try:
            width, height, _viewbox = node_format(None, Tree(bytestring=data))
            if width < 0 or height < 0:
                raise DecodeError(f"SVG имеет отрицательный размер: {width}x{height}")
            if width and height:
                if width >= height:
                    image = self._open_png(render(output_width=self._svg_canvas))
                else:
                    image = self._open_png(render(output_height=self._svg_canvas))
            else:
                # размер в единицах или процентах: высота следует пропорциям документа
                image = self._open_png(render(output_width=self._svg_canvas))
                if image.height > self._svg_canvas:
                    image = self._open_png(render(output_height=self._svg_canvas))
        except DecodeError:
            raise
        except Exception as exc:  # cairosvg не сводит ошибки разбора к одному типу
            raise DecodeError(f"Не удалось растеризовать SVG: {exc}") from exc

        if image.width == 0 or image.height == 0:
            raise DecodeError("SVG имеет нулевой размер")
        return image

    def _open_png(self, png: bytes) -> Image.Image:
        image = Image.open(io.BytesIO(png))
        image.load()
        return image
