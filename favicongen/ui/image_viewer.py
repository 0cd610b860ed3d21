"""Виджет превью: исходник со скруглёнными углами и лента готовых вариантов.

Принципы:
- SRP: отвечает только за отображение; картинки для показа готовит контроллер.
- Чистый код: публичный API из двух `set_*` методов, остальное — внутренняя отрисовка.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from favicongen.models.icon_model import IconVariant

THUMB_BOX = 96
STRIP_HEIGHT = 150


class ImageViewer(ctk.CTkFrame):
    """Канва превью (сверху) и горизонтальная лента вариантов (снизу)."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._strip = tk.Canvas(self, height=STRIP_HEIGHT, highlightthickness=0, bg=self._get_canvas_bg())
        self._strip.grid(row=1, column=0, sticky="ew", pady=(6, 0))

        self._preview_image: Optional[Image.Image] = None
        self._tk_preview: Optional[ImageTk.PhotoImage] = None
        # ссылки держим, иначе Tk уберёт картинки сборщиком мусора
        self._tk_thumbs: List[ImageTk.PhotoImage] = []
        self._thumbs: List[Tuple[str, Image.Image]] = []

        self._canvas.bind("<Configure>", self._on_canvas_resize)

    # ---- Public API ----
    def set_preview(self, image: Optional[Image.Image]) -> None:
        """Показывает превью исходника (None — очистить)."""
        self._preview_image = image
        self._render_preview()

    def set_variants(self, variants: Sequence[IconVariant]) -> None:
        """Показывает ленту вариантов в порядке таблицы размеров."""
        self._thumbs = []
        for variant in variants:
            image = Image.frombytes("RGBA", variant.size, variant.pixels)
            if image.width > THUMB_BOX or image.height > THUMB_BOX:
                image.thumbnail((THUMB_BOX, THUMB_BOX), Image.Resampling.LANCZOS)
            label = f"{variant.spec.width}×{variant.spec.height}"
            self._thumbs.append((label, image))
        self._render_strip()

    def clear_variants(self) -> None:
        self._thumbs = []
        self._render_strip()

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        self._render_preview()

    def _render_preview(self) -> None:
        self._canvas.delete("all")
        if self._preview_image is None:
            self._canvas.create_text(
                self._canvas.winfo_width() // 2,
                self._canvas.winfo_height() // 2,
                text="Откройте PNG, JPG или SVG",
                fill=self._get_text_color(),
            )
            return
        self._tk_preview = ImageTk.PhotoImage(self._preview_image)
        cx = self._canvas.winfo_width() // 2
        cy = self._canvas.winfo_height() // 2
        self._canvas.create_image(cx, cy, image=self._tk_preview, anchor="center")

    def _render_strip(self) -> None:
        self._strip.delete("all")
        self._tk_thumbs = []
        x = 12
        for label, image in self._thumbs:
            tk_image = ImageTk.PhotoImage(image)
            self._tk_thumbs.append(tk_image)
            self._strip.create_image(x + THUMB_BOX // 2, 12 + THUMB_BOX // 2, image=tk_image, anchor="center")
            self._strip.create_text(
                x + THUMB_BOX // 2, 12 + THUMB_BOX + 16, text=label, fill=self._get_text_color()
            )
            x += THUMB_BOX + 16

    def _get_canvas_bg(self) -> str:
        # CTk не отдаёт тему для tk.Canvas, берём нейтральный цвет
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    def _get_text_color(self) -> str:
        return "#cccccc" if ctk.get_appearance_mode().lower() == "dark" else "#444444"
