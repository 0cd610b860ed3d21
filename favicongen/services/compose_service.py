"""Построение полного набора вариантов по таблице размеров.

Принципы:
- SRP: оркестрация ресайза и маски; сами алгоритмы — в `ResizeService` и `MaskService`.
- DIP: сервисы передаются в конструктор, по умолчанию — стандартные реализации.

Варианты независимы: каждый строится из собственной копии исходника, поэтому их
можно считать параллельно. Первая же ошибка отменяет весь набор.
"""
from __future__ import annotations

import io
import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from favicongen.models.errors import FaviconError, ProcessingError
from favicongen.models.icon_model import CanonicalImage, IconVariant, RadiusPolicy, SizeSpec
from favicongen.services.mask_service import MaskService
from favicongen.services.resize_service import ResizeService

logger = logging.getLogger(__name__)


class ComposeService:
    def __init__(
        self,
        resize_service: Optional[ResizeService] = None,
        mask_service: Optional[MaskService] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self._resize = resize_service or ResizeService()
        self._mask = mask_service or MaskService()
        self._max_workers = max_workers

    def render(self, source: CanonicalImage, spec: SizeSpec, policy: RadiusPolicy) -> Tuple[np.ndarray, int]:
        """Ресайз и, если нужно, скругление. Возвращает RGBA-массив и применённый радиус."""
        resized = self._resize.resize(source.to_pil(), spec.width, spec.height, spec.fit)
        pixels = np.asarray(resized, dtype=np.uint8)
        if not spec.round_corners:
            return pixels, 0
        radius = policy.effective_radius(spec.width, spec.height)
        return self._mask.apply_rounded_corners(pixels, radius), radius

    def build_variant(self, source: CanonicalImage, spec: SizeSpec, policy: RadiusPolicy) -> IconVariant:
        """Строит один вариант: ресайз, при необходимости скругление, кодирование в PNG."""
        pixels, radius = self.render(source, spec, policy)
        raw = pixels.tobytes()
        return IconVariant(spec=spec, png=self._encode_png(raw, spec), pixels=raw, radius=radius)

    def compose(
        self, source: CanonicalImage, policy: RadiusPolicy, specs: Sequence[SizeSpec]
    ) -> Dict[str, IconVariant]:
        """
        Возвращает варианты в порядке `specs` (имя -> вариант).

        Raises:
            ProcessingError: при сбое любого варианта; частичный набор не возвращается.
        """
        names = [spec.name for spec in specs]
        if len(set(names)) != len(names):
            raise ProcessingError(f"Имена вариантов в таблице размеров повторяются: {names}")
        if not specs:
            return {}

        results: List[Optional[IconVariant]] = [None] * len(specs)
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures: Dict[Future, int] = {
                pool.submit(self.build_variant, source, spec, policy): index for index, spec in enumerate(specs)
            }
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            # ошибки собираем в порядке таблицы, чтобы сообщение не зависело от планировщика
            for future in sorted(done, key=futures.__getitem__):
                exc = future.exception()
                if exc is not None:
                    spec = specs[futures[future]]
                    raise self._wrap_error(spec, exc) from exc
                results[futures[future]] = future.result()

        variants: Dict[str, IconVariant] = {}
        for spec, variant in zip(specs, results):
            if variant is None:
                raise ProcessingError(f"Вариант {spec.name} не был построен")
            variants[spec.name] = variant
            logger.debug("Variant %s: %dx%d, radius %d", spec.name, spec.width, spec.height, variant.radius)
        return variants

    def _wrap_error(self, spec: SizeSpec, exc: BaseException) -> FaviconError:
        if isinstance(exc, FaviconError):
            return type(exc)(f"{spec.name}: {exc}")
        return ProcessingError(f"{spec.name}: {exc}")

    def _encode_png(self, raw: bytes, spec: SizeSpec) -> bytes:
        buffer = io.BytesIO()
        Image.frombytes("RGBA", (spec.width, spec.height), raw).save(buffer, format="PNG")
        return buffer.getvalue()
