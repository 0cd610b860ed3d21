"""Сборка и разбор мульти-разрешённого контейнера ICO.

Формат: заголовок 6 байт (reserved=0, type=1, count), затем по 16 байт каталога
на запись (width, height, colorCount, reserved, planes, bpp, size, offset) и
подряд идущие полезные нагрузки. Все поля little-endian; 256 px кодируется как 0.
В качестве нагрузки используются целые PNG-файлы.
"""
from __future__ import annotations

import io
import logging
import struct
from typing import List, Sequence

from PIL import Image, UnidentifiedImageError

from favicongen.models.errors import EncodeError
from favicongen.models.icon_model import ContainerEntry, IconVariant

logger = logging.getLogger(__name__)

HEADER = struct.Struct("<HHH")
DIRECTORY_ENTRY = struct.Struct("<BBBBHHII")
ICON_TYPE = 1
MAX_DIMENSION = 256


class IcoService:
    def entries_from_variants(self, variants: Sequence[IconVariant]) -> List[ContainerEntry]:
        """Записи контейнера из готовых вариантов, порядок сохраняется."""
        return [ContainerEntry(width=v.spec.width, height=v.spec.height, data=v.png) for v in variants]

    def encode(self, entries: Sequence[ContainerEntry]) -> bytes:
        """
        Собирает ICO из записей в переданном порядке.

        Raises:
            EncodeError: если записей нет, размер вне 1..256 или заявленные
                размеры не совпадают с реальными размерами нагрузки.
        """
        if not entries:
            raise EncodeError("Контейнер ICO не может быть пустым")

        for index, entry in enumerate(entries):
            self._check_entry(index, entry)

        count = len(entries)
        offset = HEADER.size + DIRECTORY_ENTRY.size * count
        header = HEADER.pack(0, ICON_TYPE, count)
        directory = []
        for entry in entries:
            directory.append(
                DIRECTORY_ENTRY.pack(
                    self._dimension_byte(entry.width),
                    self._dimension_byte(entry.height),
                    0,  # палитры нет при >= 8 bpp
                    0,
                    1,
                    entry.bit_depth,
                    len(entry.data),
                    offset,
                )
            )
            offset += len(entry.data)

        container = b"".join([header, *directory, *(entry.data for entry in entries)])
        if len(container) != offset:
            raise EncodeError(f"Размер контейнера {len(container)} не совпадает с каталогом ({offset})")
        logger.info("Encoded ICO container: %d entries, %d bytes", count, len(container))
        return container

    def decode(self, container: bytes) -> List[ContainerEntry]:
        """Разбирает ICO обратно в записи (порядок каталога)."""
        if len(container) < HEADER.size:
            raise EncodeError("Контейнер короче заголовка")
        reserved, kind, count = HEADER.unpack_from(container, 0)
        if reserved != 0 or kind != ICON_TYPE:
            raise EncodeError(f"Неверный заголовок ICO: reserved={reserved}, type={kind}")
        if len(container) < HEADER.size + DIRECTORY_ENTRY.size * count:
            raise EncodeError("Каталог ICO обрезан")

        entries: List[ContainerEntry] = []
        for index in range(count):
            width, height, _colors, _reserved, _planes, bpp, size, offset = DIRECTORY_ENTRY.unpack_from(
                container, HEADER.size + DIRECTORY_ENTRY.size * index
            )
            if offset + size > len(container):
                raise EncodeError(f"Запись {index} выходит за пределы контейнера")
            entries.append(
                ContainerEntry(
                    width=width or MAX_DIMENSION,
                    height=height or MAX_DIMENSION,
                    data=container[offset:offset + size],
                    bit_depth=bpp,
                )
            )
        return entries

    def _check_entry(self, index: int, entry: ContainerEntry) -> None:
        for value in (entry.width, entry.height):
            if not 1 <= value <= MAX_DIMENSION:
                raise EncodeError(f"Запись {index}: размер {entry.width}x{entry.height} вне диапазона 1..256")
        try:
            actual = Image.open(io.BytesIO(entry.data)).size
        except (UnidentifiedImageError, OSError) as exc:
            raise EncodeError(f"Запись {index}: нагрузка не является изображением") from exc
        if actual != (entry.width, entry.height):
            raise EncodeError(
                f"Запись {index}: заявлено {entry.width}x{entry.height}, в нагрузке {actual[0]}x{actual[1]}"
            )

    def _dimension_byte(self, value: int) -> int:
        return 0 if value == MAX_DIMENSION else value
