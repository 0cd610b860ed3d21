from __future__ import annotations

import io
from typing import Tuple

import pytest
from PIL import Image

from favicongen.models.icon_model import AppMetadata, CanonicalImage, GenerationRequest
from favicongen.services.pipeline_service import PipelineService

RED = (255, 0, 0)


def encode(image: Image.Image, fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def solid_png(size: Tuple[int, int], color=RED, mode: str = "RGB") -> bytes:
    return encode(Image.new(mode, size, color))


def svg_rect(width: int, height: int, fill: str = "#ff0000") -> bytes:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}"><rect x="0" y="0" width="{width}" height="{height}" '
        f'fill="{fill}"/></svg>'
    ).encode("utf-8")


@pytest.fixture
def cairosvg_available() -> None:
    """Пропускает тест, если нет cairosvg или системной libcairo."""
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError) as exc:
        pytest.skip(f"cairosvg недоступен: {exc}")


@pytest.fixture
def red_square_png() -> bytes:
    return solid_png((512, 512))


@pytest.fixture
def red_square() -> CanonicalImage:
    return CanonicalImage.from_pil(Image.new("RGBA", (512, 512), RED + (255,)), source_format="PNG")


@pytest.fixture(scope="session")
def red_bundle():
    """Полный набор из непрозрачного красного квадрата 512x512 с радиусом 40."""
    request = GenerationRequest(
        data=solid_png((512, 512)),
        mime_type="image/png",
        radius=40,
        metadata=AppMetadata(app_name="Demo App", short_name="Demo", theme_color="#123456"),
    )
    return PipelineService().run(request)
