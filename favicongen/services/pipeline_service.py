"""Один запрос генерации: проверка, декодирование, набор вариантов, ICO.

Принципы:
- SRP: только порядок шагов и политика ошибок; вся обработка — в сервисах.
- Всё или ничего: любой сбой прерывает запрос, частичный набор не возвращается.
"""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Optional

from PIL import Image

from favicongen import config
from favicongen.models.errors import FaviconError, ProcessingError, ValidationError
from favicongen.models.icon_model import (
    AppMetadata,
    CanonicalImage,
    GenerationRequest,
    IconBundle,
    RadiusPolicy,
    SizeSpec,
)
from favicongen.services.compose_service import ComposeService
from favicongen.services.ico_service import IcoService
from favicongen.services.raster_service import RasterService
from favicongen.services.resize_service import contained_size

logger = logging.getLogger(__name__)


def clamp_radius(value: object) -> int:
    """Приводит запрошенный радиус к целому в [0, MAX_RADIUS]."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f"Радиус должен быть целым числом: {value!r}")
    try:
        number = float(value)
    except ValueError as exc:
        raise ValidationError(f"Радиус должен быть целым числом: {value!r}") from exc
    if not number.is_integer():
        raise ValidationError(f"Радиус должен быть целым числом: {value!r}")
    return max(0, min(config.MAX_RADIUS, int(number)))


def read_request(
    file_path: str | Path, radius: int = config.DEFAULT_RADIUS, metadata: Optional[AppMetadata] = None
) -> GenerationRequest:
    """Читает файл с диска и определяет MIME-тип по расширению.

    Raises:
        FileNotFoundError: если путь не существует или не указывает на файл.
        ValidationError: если расширение не поддерживается или файл слишком большой.
    """
    path = Path(file_path)
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(f"Файл не найден: {path}")

    mime_type = config.SUFFIX_MIME_TYPES.get(path.suffix.lower())
    if mime_type is None:
        raise ValidationError("Поддерживаются только файлы PNG, JPG и SVG")
    # проверяем размер до чтения, чтобы не тянуть в память огромный файл
    if path.stat().st_size > config.MAX_UPLOAD_BYTES:
        raise ValidationError("Размер файла должен быть не больше 10 МБ")

    return GenerationRequest(
        data=path.read_bytes(), mime_type=mime_type, radius=radius, metadata=metadata or AppMetadata()
    )


class PipelineService:
    def __init__(
        self,
        settings: Optional[config.PipelineSettings] = None,
        raster_service: Optional[RasterService] = None,
        compose_service: Optional[ComposeService] = None,
        ico_service: Optional[IcoService] = None,
    ) -> None:
        self._settings = settings or config.PipelineSettings()
        self._raster = raster_service or RasterService()
        self._compose = compose_service or ComposeService(max_workers=self._settings.max_workers)
        self._ico = ico_service or IcoService()
        self._lock = threading.Lock()
        self._inflight: Optional[Future] = None

    @property
    def settings(self) -> config.PipelineSettings:
        return self._settings

    @property
    def busy(self) -> bool:
        """Идёт ли ещё предыдущий запуск, в том числе брошенный по таймауту."""
        future = self._inflight
        return future is not None and not future.done()

    def validate(self, request: GenerationRequest) -> int:
        """Проверяет запрос до декодирования и возвращает ограниченный радиус."""
        if request.mime_type not in config.ACCEPTED_MIME_TYPES:
            raise ValidationError("Поддерживаются только файлы PNG, JPG и SVG")
        if len(request.data) == 0:
            raise ValidationError("Файл пуст")
        if len(request.data) > self._settings.max_upload_bytes:
            limit_mb = self._settings.max_upload_bytes // (1024 * 1024)
            raise ValidationError(f"Размер файла должен быть не больше {limit_mb} МБ")
        return clamp_radius(request.radius)

    def radius_policy(self, radius: int) -> RadiusPolicy:
        return RadiusPolicy(base_radius=radius, reference_size=self._settings.reference_size)

    def decode(self, request: GenerationRequest) -> CanonicalImage:
        """Проверяет запрос и декодирует исходник (для превью до генерации)."""
        self.validate(request)
        return self._raster.normalize(request.data, request.mime_type)

    def preview(self, source: CanonicalImage, radius: int) -> Image.Image:
        """Исходник, вписанный в квадрат `reference_size`, со скруглением запрошенного радиуса."""
        box = self._settings.reference_size
        width, height = contained_size((source.width, source.height), box, box)
        # радиус задан в пикселях превью: опорный размер совпадает с меньшей стороной
        policy = RadiusPolicy(base_radius=clamp_radius(radius), reference_size=min(width, height))
        pixels, _radius = self._compose.render(source, SizeSpec("preview", width, height), policy)
        return Image.fromarray(pixels.copy())

    def run(self, request: GenerationRequest) -> IconBundle:
        """
        Выполняет весь запрос за отведённое время.

        Raises:
            ValidationError | DecodeError | ProcessingError | EncodeError: первая ошибка
                конвейера без изменений.
        """
        with self._lock:
            if self.busy:
                raise ProcessingError("Предыдущая генерация ещё не завершилась")
            pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="favicongen")
            future = pool.submit(self._run_steps, request)
            self._inflight = future
        started = time.monotonic()
        logger.info("Generation started: %s, %d bytes", request.mime_type, len(request.data))
        try:
            bundle = future.result(timeout=self._settings.timeout_seconds)
        except FutureTimeoutError as exc:
            error = ProcessingError(f"Превышено время обработки ({self._settings.timeout_seconds:g} с)")
            logger.error("Generation failed: %s", error)
            raise error from exc
        except FaviconError as exc:
            logger.error("Generation failed: %s: %s", type(exc).__name__, exc)
            raise
        finally:
            pool.shutdown(wait=False)

        logger.info(
            "Generation finished: %d variants, ICO %d bytes, %.2f s",
            len(bundle.variants), len(bundle.container), time.monotonic() - started,
        )
        return bundle

    def _run_steps(self, request: GenerationRequest) -> IconBundle:
        radius = self.validate(request)
        source = self._raster.normalize(request.data, request.mime_type)
        policy = self.radius_policy(radius)
        variants = self._compose.compose(source, policy, self._settings.size_table)

        wanted = (*self._settings.container_variants, *self._settings.output_layout.values())
        missing = sorted({name for name in wanted if name not in variants})
        if missing:
            raise ProcessingError(f"В наборе не хватает вариантов: {', '.join(missing)}")
        container = self._ico.encode(
            self._ico.entries_from_variants([variants[name] for name in self._settings.container_variants])
        )

        return IconBundle(
            variants=variants,
            container=container,
            radius_policy=policy,
            layout=dict(self._settings.output_layout),
            container_paths=tuple(self._settings.container_paths),
        )
