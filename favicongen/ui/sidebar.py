"""Боковая панель: открытие файла, информация об исходнике, параметры генерации.

Принципы:
- SRP: управляет только UI параметров, не содержит обработки изображений.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

import re
from typing import Callable, Optional

import customtkinter as ctk

from favicongen import config
from favicongen.models.icon_model import AppMetadata, CanonicalImage

SIDEBAR_WIDTH = 280
_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _format_size(size_bytes: int) -> str:
    """Размер файла в человекочитаемом виде."""
    if size_bytes < 1024:
        return f"{size_bytes} Б"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} КБ"
    return f"{size_bytes / (1024 * 1024):.1f} МБ"


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, скругление, приложение."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=SIDEBAR_WIDTH, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_radius_change: Optional[Callable[[int], None]] = None
        self.on_generate: Optional[Callable[[], None]] = None

        # Controls
        self._title = ctk.CTkLabel(self, text="Инструменты", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=2, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._format_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_format = ctk.CTkLabel(self, textvariable=self._format_val, anchor="w", justify="left")

        self._info_path.grid(row=3, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_format.grid(row=6, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Скругление
        self._radius_title = ctk.CTkLabel(self, text="Скругление углов", font=ctk.CTkFont(size=16, weight="bold"))
        self._radius_title.grid(row=7, column=0, padx=8, pady=(8, 4), sticky="w")

        self._radius_val = ctk.StringVar(value=f"{config.DEFAULT_RADIUS}px")
        self._radius_label = ctk.CTkLabel(self, text=f"Радиус (для превью {config.REFERENCE_SIZE}px):")
        self._radius_slider = ctk.CTkSlider(
            self, from_=0, to=config.MAX_RADIUS, number_of_steps=config.MAX_RADIUS, command=self._on_radius_slider
        )
        self._radius_slider.set(config.DEFAULT_RADIUS)
        self._radius_value = ctk.CTkLabel(self, textvariable=self._radius_val, width=48, anchor="w")
        self._radius_label.grid(row=8, column=0, padx=8, pady=(0, 2), sticky="w")
        self._radius_slider.grid(row=9, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._radius_value.grid(row=10, column=0, padx=8, pady=(0, 10), sticky="w")

        # Приложение
        self._app_title = ctk.CTkLabel(self, text="Приложение", font=ctk.CTkFont(size=16, weight="bold"))
        self._app_title.grid(row=11, column=0, padx=8, pady=(8, 4), sticky="w")

        defaults = AppMetadata()
        self._app_name_val = ctk.StringVar(value=defaults.app_name)
        self._short_name_val = ctk.StringVar(value=defaults.short_name)
        self._theme_color_val = ctk.StringVar(value=defaults.theme_color)

        self._app_name_label = ctk.CTkLabel(self, text="Название:")
        self._app_name_entry = ctk.CTkEntry(self, textvariable=self._app_name_val)
        self._short_name_label = ctk.CTkLabel(self, text="Краткое название:")
        self._short_name_entry = ctk.CTkEntry(self, textvariable=self._short_name_val)
        self._theme_color_label = ctk.CTkLabel(self, text="Цвет темы (#RRGGBB):")
        self._theme_color_entry = ctk.CTkEntry(self, textvariable=self._theme_color_val, width=100)

        self._app_name_label.grid(row=12, column=0, padx=8, pady=(0, 2), sticky="w")
        self._app_name_entry.grid(row=13, column=0, padx=8, pady=(0, 6), sticky="ew")
        self._short_name_label.grid(row=14, column=0, padx=8, pady=(0, 2), sticky="w")
        self._short_name_entry.grid(row=15, column=0, padx=8, pady=(0, 6), sticky="ew")
        self._theme_color_label.grid(row=16, column=0, padx=8, pady=(0, 2), sticky="w")
        self._theme_color_entry.grid(row=17, column=0, padx=8, pady=(0, 10), sticky="w")

        # filler
        self.grid_rowconfigure(99, weight=1)

        self._generate_btn = ctk.CTkButton(self, text="Сгенерировать", command=self._emit_generate, state="disabled")
        self._generate_btn.grid(row=100, column=0, padx=8, pady=(0, 8), sticky="ew")

    # ---- Public API ----
    def set_image_info(self, path: str, size_bytes: int, image: CanonicalImage) -> None:
        self._path_val.set(f"Файл: {path}")
        self._size_val.set(f"Размер файла: {_format_size(size_bytes)}")
        self._dims_val.set(f"Разрешение: {image.width}×{image.height}")
        self._format_val.set(f"Формат: {image.source_format}")

    def set_generate_enabled(self, enabled: bool) -> None:
        self._generate_btn.configure(state="normal" if enabled else "disabled")

    def set_busy(self, busy: bool, label: str = "Генерация…") -> None:
        """Блокирует элементы на время загрузки или генерации."""
        state = "disabled" if busy else "normal"
        self._open_btn.configure(state=state)
        self._generate_btn.configure(state=state)
        self._generate_btn.configure(text=label if busy else "Сгенерировать")

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_generate(self) -> None:
        if self.on_generate:
            self.on_generate()

    def _on_radius_slider(self, value: float) -> None:
        radius = int(round(value))
        self._radius_val.set(f"{radius}px")
        if self.on_radius_change:
            self.on_radius_change(radius)

    # ---- Helpers ----
    # Параметры генерации
    def get_radius(self) -> int:
        """Возвращает радиус в диапазоне [0, MAX_RADIUS]."""
        try:
            radius = int(round(float(self._radius_slider.get())))
        except (TypeError, ValueError):
            radius = config.DEFAULT_RADIUS
        return max(0, min(config.MAX_RADIUS, radius))

    def get_metadata(self) -> AppMetadata:
        """Метаданные приложения; пустые поля заменяются значениями по умолчанию."""
        defaults = AppMetadata()
        app_name = self._app_name_val.get().strip() or defaults.app_name
        short_name = self._short_name_val.get().strip() or defaults.short_name
        theme_color = self._theme_color_val.get().strip()
        if not _HEX_COLOR.match(theme_color):
            theme_color = defaults.theme_color
            self._theme_color_val.set(theme_color)
        return AppMetadata(app_name=app_name, short_name=short_name, theme_color=theme_color)
