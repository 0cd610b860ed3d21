import io

import numpy as np
import pytest
from PIL import Image

from favicongen import config
from favicongen.models.errors import ProcessingError
from favicongen.models.icon_model import FitPolicy, RadiusPolicy, SizeSpec
from favicongen.services.compose_service import ComposeService
from favicongen.services.mask_service import MaskService
from favicongen.services.resize_service import ResizeService

POLICY = RadiusPolicy(base_radius=40, reference_size=192)


class FailingResize(ResizeService):
    def __init__(self, fail_width, exc):
        super().__init__()
        self._fail_width = fail_width
        self._exc = exc

    def resize(self, image, width, height, fit):
        if width == self._fail_width:
            raise self._exc
        return super().resize(image, width, height, fit)


def test_compose_builds_every_size_in_table_order(red_square):
    variants = ComposeService().compose(red_square, POLICY, config.SIZE_TABLE)

    assert list(variants) == [spec.name for spec in config.SIZE_TABLE]
    for spec in config.SIZE_TABLE:
        variant = variants[spec.name]
        assert variant.spec == spec
        assert len(variant.pixels) == spec.width * spec.height * 4
        decoded = Image.open(io.BytesIO(variant.png))
        assert decoded.format == "PNG"
        assert decoded.size == (spec.width, spec.height)
        assert decoded.convert("RGBA").tobytes() == variant.pixels


def test_compose_applies_scaled_radius(red_square):
    variants = ComposeService().compose(red_square, POLICY, config.SIZE_TABLE)
    radii = {name: variant.radius for name, variant in variants.items()}
    assert radii == {
        "favicon-16x16": 3,
        "favicon-32x32": 7,
        "favicon-48x48": 10,
        "apple-touch-icon": 38,
        "android-chrome-192x192": 40,
        "android-chrome-512x512": 107,
        "opengraph-image": 0,
    }

    favicon = variants["favicon-32x32"]
    alpha = np.frombuffer(favicon.pixels, dtype=np.uint8).reshape(32, 32, 4)[..., 3]
    assert np.array_equal(alpha == 0, MaskService().corner_cutout(32, 32, 7))


def test_unrounded_spec_is_never_masked(red_square):
    spec = SizeSpec("square", 64, 64, round_corners=False)
    variant = ComposeService().build_variant(red_square, spec, RadiusPolicy(base_radius=256, reference_size=192))
    assert variant.radius == 0
    assert np.all(np.frombuffer(variant.pixels, dtype=np.uint8)[3::4] == 255)


def test_variants_do_not_depend_on_each_other(red_square):
    service = ComposeService()
    spec = SizeSpec("favicon-48x48", 48, 48)
    alone = service.compose(red_square, POLICY, [spec])["favicon-48x48"]
    together = service.compose(red_square, POLICY, config.SIZE_TABLE)["favicon-48x48"]
    assert alone.pixels == together.pixels
    assert alone.png == together.png


def test_sequential_and_parallel_results_match(red_square):
    serial = ComposeService(max_workers=1).compose(red_square, POLICY, config.SIZE_TABLE)
    parallel = ComposeService(max_workers=4).compose(red_square, POLICY, config.SIZE_TABLE)
    assert {k: v.png for k, v in serial.items()} == {k: v.png for k, v in parallel.items()}


def test_compose_does_not_touch_source(red_square):
    before = red_square.pixels
    ComposeService().compose(red_square, POLICY, config.SIZE_TABLE)
    assert red_square.pixels == before


def test_failure_aborts_whole_batch(red_square):
    service = ComposeService(resize_service=FailingResize(48, ProcessingError("boom")))
    with pytest.raises(ProcessingError, match="favicon-48x48"):
        service.compose(red_square, POLICY, config.SIZE_TABLE)


def test_unexpected_failure_is_wrapped(red_square):
    service = ComposeService(resize_service=FailingResize(180, MemoryError("out of memory")))
    with pytest.raises(ProcessingError, match="apple-touch-icon"):
        service.compose(red_square, POLICY, config.SIZE_TABLE)


def test_duplicate_names_rejected(red_square):
    specs = [SizeSpec("a", 16, 16), SizeSpec("a", 32, 32)]
    with pytest.raises(ProcessingError):
        ComposeService().compose(red_square, POLICY, specs)


def test_empty_table_gives_empty_set(red_square):
    assert ComposeService().compose(red_square, POLICY, []) == {}


def test_contain_variant_keeps_transparent_margins(red_square):
    spec = SizeSpec("wide", 300, 100, fit=FitPolicy.CONTAIN, round_corners=False)
    variant = ComposeService().build_variant(red_square, spec, POLICY)
    alpha = np.frombuffer(variant.pixels, dtype=np.uint8).reshape(100, 300, 4)[..., 3]
    assert np.all(alpha[:, :100] == 0)
    assert np.all(alpha[:, 100:200] == 255)
    assert np.all(alpha[:, 200:] == 0)
