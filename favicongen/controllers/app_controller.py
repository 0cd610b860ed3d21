"""Контроллер приложения: оркестрация UI и сервисов генерации.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; загрузка и генерация идут в фоновом потоке, UI обновляется через `after`.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from tkinter import filedialog, TclError
from typing import Optional

import customtkinter as ctk

from favicongen.models.errors import FaviconError
from favicongen.models.icon_model import CanonicalImage, GenerationRequest, IconBundle
from favicongen.services.package_service import PackageService
from favicongen.services.pipeline_service import PipelineService, read_request
from favicongen.ui.bottom_bar import BottomBar
from favicongen.ui.image_viewer import ImageViewer
from favicongen.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка исходника и превью скругления через `PipelineService`.
    - Запуск генерации вне UI-потока и сохранение архива через `PackageService`.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _pipeline: PipelineService = field(default_factory=PipelineService)
    _packager: PackageService = field(default_factory=PackageService)
    _request: Optional[GenerationRequest] = None
    _source: Optional[CanonicalImage] = None
    _bundle: Optional[IconBundle] = None
    _worker: Optional[threading.Thread] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_radius_change = self._handle_radius_change
        self.sidebar.on_generate = self._handle_generate
        self.bottom.on_save_archive = self._handle_save_archive

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.svg"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path or self._is_working():
            return

        self.sidebar.set_busy(True, label="Загрузка…")
        self.bottom.set_status(f"Загрузка: {Path(file_path).name}…")
        self._worker = threading.Thread(
            target=self._load_in_background, args=(file_path, self.sidebar.get_radius()), daemon=True
        )
        self._worker.start()

    def _on_source_loaded(self, file_path: str, request: GenerationRequest, source: CanonicalImage) -> None:
        self.sidebar.set_busy(False)
        self._request = request
        self._source = source
        self._bundle = None
        self.sidebar.set_image_info(file_path, len(request.data), source)
        self.sidebar.set_generate_enabled(True)
        self.viewer.clear_variants()
        self.bottom.set_result_ready(False)
        self._update_preview()
        self.bottom.set_status(f"Загружено: {Path(file_path).name}")

    def _handle_radius_change(self, _radius: int) -> None:
        self._update_preview()

    def _handle_generate(self) -> None:
        if self._request is None or self._is_working():
            return
        if self._pipeline.busy:
            self.bottom.set_status("Предыдущая генерация ещё не завершилась, попробуйте позже", error=True)
            return
        request = GenerationRequest(
            data=self._request.data,
            mime_type=self._request.mime_type,
            radius=self.sidebar.get_radius(),
            metadata=self.sidebar.get_metadata(),
        )
        self.sidebar.set_busy(True)
        self.bottom.set_result_ready(False)
        self.bottom.set_status("Генерация…")
        self._worker = threading.Thread(target=self._generate_in_background, args=(request,), daemon=True)
        self._worker.start()

    def _handle_save_archive(self) -> None:
        if self._bundle is None or self._request is None:
            return
        now = datetime.now()
        try:
            target = filedialog.asksaveasfilename(
                title="Сохранить архив",
                defaultextension=".zip",
                initialfile=self._packager.archive_name(now),
                filetypes=(("ZIP", "*.zip"),),
            )
        except TclError:
            return
        if not target:
            return

        archive = self._packager.build_archive(self._bundle, self._request.metadata, now)
        try:
            Path(target).write_bytes(archive)
        except OSError as exc:
            self.bottom.set_status(f"Не удалось сохранить архив: {exc}", error=True)
            return
        self.bottom.set_status(f"Архив сохранён: {target}")

    # ---- Helpers ----
    def _is_working(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def _load_in_background(self, file_path: str, radius: int) -> None:
        try:
            request = read_request(file_path, radius=radius)
            source = self._pipeline.decode(request)
        except (FaviconError, OSError) as exc:
            message = str(exc)
            self.window.after(0, lambda: self._on_load_failed(message))
            return
        self.window.after(0, lambda: self._on_source_loaded(file_path, request, source))

    def _on_load_failed(self, message: str) -> None:
        self.sidebar.set_busy(False)
        self.sidebar.set_generate_enabled(self._request is not None)
        self.bottom.set_status(message, error=True)

    def _update_preview(self) -> None:
        """Перерисовывает превью с текущим радиусом. Исходник не мутируется."""
        if self._source is None:
            return
        try:
            preview = self._pipeline.preview(self._source, self.sidebar.get_radius())
        except FaviconError as exc:
            self.bottom.set_status(str(exc), error=True)
            return
        self.viewer.set_preview(preview)

    def _generate_in_background(self, request: GenerationRequest) -> None:
        try:
            bundle = self._pipeline.run(request)
        except FaviconError as exc:
            message = str(exc)
            self.window.after(0, lambda: self._on_generation_failed(message))
            return
        except Exception as exc:  # любую ошибку показываем в строке статуса
            logger.exception("Unexpected generation failure")
            message = f"Непредвиденная ошибка: {exc}"
            self.window.after(0, lambda: self._on_generation_failed(message))
            return
        self.window.after(0, lambda: self._on_generation_done(request, bundle))

    def _on_generation_done(self, request: GenerationRequest, bundle: IconBundle) -> None:
        self._request = request
        self._bundle = bundle
        self.sidebar.set_busy(False)
        self.viewer.set_variants([bundle.variants[spec.name] for spec in self._pipeline.settings.size_table])
        self.bottom.set_snippets(
            self._packager.nextjs_metadata_snippet(request.metadata),
            self._packager.html_head_tags(request.metadata),
        )
        self.bottom.set_result_ready(True)
        radius_512 = bundle.radius_policy.effective_radius(512, 512)
        self.bottom.set_status(
            f"Готово: {len(bundle.files())} файлов, радиус {bundle.radius_policy.base_radius}px "
            f"(при 512px — {radius_512}px)"
        )

    def _on_generation_failed(self, message: str) -> None:
        self._bundle = None
        self.sidebar.set_busy(False)
        self.bottom.set_result_ready(False)
        self.bottom.set_status(message, error=True)
