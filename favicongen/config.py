"""Статическая конфигурация: таблица размеров, раскладка выходных файлов, лимиты.

Добавить или убрать размер — значит поправить таблицу, логика ресайза и
маскирования при этом не меняется.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from favicongen.models.icon_model import FitPolicy, SizeSpec

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

MIME_PNG = "image/png"
MIME_JPEG = "image/jpeg"
MIME_SVG = "image/svg+xml"
ACCEPTED_MIME_TYPES: Tuple[str, ...] = (MIME_PNG, MIME_JPEG, "image/jpg", MIME_SVG)

SUFFIX_MIME_TYPES: Dict[str, str] = {
    ".png": MIME_PNG,
    ".jpg": MIME_JPEG,
    ".jpeg": MIME_JPEG,
    ".svg": MIME_SVG,
}

# SVG растеризуется один раз в квадрат SVG_CANVAS (вписыванием), дальше только уменьшается
SVG_CANVAS = 1024
SVG_DPI = 300

DEFAULT_RADIUS = 40
MAX_RADIUS = 256
# Размер превью, для которого пользователь выбирает радиус
REFERENCE_SIZE = 192

SIZE_TABLE: Tuple[SizeSpec, ...] = (
    SizeSpec("favicon-16x16", 16, 16),
    SizeSpec("favicon-32x32", 32, 32),
    SizeSpec("favicon-48x48", 48, 48),
    SizeSpec("apple-touch-icon", 180, 180),
    SizeSpec("android-chrome-192x192", 192, 192),
    SizeSpec("android-chrome-512x512", 512, 512),
    SizeSpec("opengraph-image", 1200, 630, fit=FitPolicy.CONTAIN, round_corners=False),
)

# Порядок записей ICO: от меньшего к большему
CONTAINER_VARIANTS: Tuple[str, ...] = ("favicon-16x16", "favicon-32x32", "favicon-48x48")

OUTPUT_LAYOUT: Dict[str, str] = {
    **{f"public/{spec.name}.png": spec.name for spec in SIZE_TABLE},
    # автообнаружение в App Router
    "src/app/icon.png": "favicon-32x32",
    "src/app/apple-icon.png": "apple-touch-icon",
}

CONTAINER_PATHS: Tuple[str, ...] = ("public/favicon.ico", "src/app/favicon.ico")


@dataclass(frozen=True)
class PipelineSettings:
    """Параметры одного прогона конвейера.

    Fields:
        max_upload_bytes: Потолок размера входного файла.
        reference_size: Размер, к которому привязан запрошенный радиус.
        max_workers: Размер пула для вариантов; None — по числу ядер.
        timeout_seconds: Предел времени на весь запрос.
    """
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    reference_size: int = REFERENCE_SIZE
    max_workers: Optional[int] = field(default_factory=os.cpu_count)
    timeout_seconds: float = 60.0
    size_table: Tuple[SizeSpec, ...] = SIZE_TABLE
    container_variants: Tuple[str, ...] = CONTAINER_VARIANTS
    output_layout: Dict[str, str] = field(default_factory=lambda: dict(OUTPUT_LAYOUT))
    container_paths: Tuple[str, ...] = CONTAINER_PATHS
