import customtkinter as ctk

from favicongen import config
from favicongen.controllers.app_controller import AppController
from favicongen.ui.bottom_bar import BottomBar
from favicongen.ui.image_viewer import STRIP_HEIGHT, THUMB_BOX, ImageViewer
from favicongen.ui.sidebar import SIDEBAR_WIDTH, Sidebar

# превью, лента вариантов и нижняя панель по вертикали
MIN_HEIGHT = config.REFERENCE_SIZE + STRIP_HEIGHT + 220


def _min_width() -> int:
    """Ширина, при которой лента показывает все варианты без прокрутки."""
    strip = len(config.SIZE_TABLE) * (THUMB_BOX + 16) + 16
    return strip + SIDEBAR_WIDTH + 48


class FaviconGeneratorApp(ctk.CTk):
    def __init__(self) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("Favicon Generator")
        self.minsize(_min_width(), MIN_HEIGHT)

        # preview + variant strip on the left, parameters on the right, status/export below
        self.grid_columnconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=0, minsize=SIDEBAR_WIDTH)
        self.grid_rowconfigure(0, weight=1)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="nsew", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(viewer=self._viewer, sidebar=self._sidebar, bottom=self._bottom, window=self)
        self._controller.bind_events()
        self._bottom.set_status("Откройте PNG, JPG или SVG, чтобы начать")
