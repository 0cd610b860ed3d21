from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=64, **kwargs)

        # callbacks
        self.on_save_archive: Optional[Callable[[], None]] = None

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)  # status stretches

        self._status_value = ctk.StringVar(value="Готово к работе")
        self._status_label = ctk.CTkLabel(self, textvariable=self._status_value, anchor="w")
        self._status_label.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="ew")
        self._default_text_color = self._status_label.cget("text_color")

        self._snippet_menu = ctk.CTkOptionMenu(self, values=["Next.js", "HTML"], width=100)
        self._snippet_menu.set("Next.js")
        self._snippet_menu.grid(row=0, column=1, padx=6, pady=8, sticky="e")

        self._copy_btn = ctk.CTkButton(self, text="Копировать код", width=130, command=self._on_copy, state="disabled")
        self._copy_btn.grid(row=0, column=2, padx=6, pady=8, sticky="e")

        self._save_btn = ctk.CTkButton(self, text="Сохранить ZIP…", width=130, command=self._on_save, state="disabled")
        self._save_btn.grid(row=0, column=3, padx=(6, 10), pady=8, sticky="e")

        # "Next.js" | "HTML" -> текст фрагмента
        self._snippets: dict[str, str] = {}

    # public API (sync from controller)
    def set_status(self, text: str, error: bool = False) -> None:
        self._status_value.set(text)
        self._status_label.configure(text_color="#d9534f" if error else self._default_text_color)

    def set_result_ready(self, ready: bool) -> None:
        state = "normal" if ready else "disabled"
        self._save_btn.configure(state=state)
        self._copy_btn.configure(state=state if self._snippets else "disabled")

    def set_snippets(self, nextjs: str, html: str) -> None:
        self._snippets = {"Next.js": nextjs, "HTML": html}
        self._copy_btn.configure(state="normal")

    # events
    def _on_save(self) -> None:
        if self.on_save_archive:
            self.on_save_archive()

    def _on_copy(self) -> None:
        text = self._snippets.get(self._snippet_menu.get())
        if not text:
            return
        self.clipboard_clear()
        self.clipboard_append(text)
        self.set_status(f"Код {self._snippet_menu.get()} скопирован в буфер обмена")
