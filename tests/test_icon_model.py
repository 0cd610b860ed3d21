import numpy as np
import pytest
from PIL import Image

from favicongen import config
from favicongen.models.errors import ValidationError
from favicongen.models.icon_model import CanonicalImage, RadiusPolicy


@pytest.mark.parametrize(
    "side, expected",
    [
        (16, 3),  # 3.33
        (32, 7),  # 6.67
        (48, 10),
        (180, 38),  # ровно 37.5, половина вверх
        (192, 40),
        (512, 107),
    ],
)
def test_effective_radius_scales_with_reference(side, expected):
    policy = RadiusPolicy(base_radius=40, reference_size=192)
    assert policy.effective_radius(side, side) == expected


def test_effective_radius_clamped_to_half_of_min_side():
    policy = RadiusPolicy(base_radius=256, reference_size=192)
    assert policy.scaled_radius(16) == 21
    assert policy.effective_radius(16, 16) == 8
    assert policy.effective_radius(1200, 630) == 315


def test_effective_radius_uses_min_side():
    policy = RadiusPolicy(base_radius=40, reference_size=192)
    assert policy.effective_radius(1200, 630) == policy.effective_radius(630, 630) == 131


def test_zero_radius_is_zero_everywhere():
    policy = RadiusPolicy(base_radius=0, reference_size=192)
    assert all(policy.effective_radius(spec.width, spec.height) == 0 for spec in config.SIZE_TABLE)


@pytest.mark.parametrize("base", [0, 1, 7, 40, 96, 200, 256])
def test_effective_radius_is_monotonic_in_target_size(base):
    policy = RadiusPolicy(base_radius=base, reference_size=192)
    radii = [policy.effective_radius(side, side) for side in range(1, 1300)]
    assert all(a <= b for a, b in zip(radii, radii[1:]))


def test_radius_policy_rejects_bad_values():
    with pytest.raises(ValidationError):
        RadiusPolicy(base_radius=-1, reference_size=192)
    with pytest.raises(ValidationError):
        RadiusPolicy(base_radius=10, reference_size=0)


def test_canonical_image_checks_buffer_length():
    with pytest.raises(ValueError):
        CanonicalImage(width=2, height=2, pixels=b"\x00" * 15, source_format="PNG")


def test_canonical_image_hands_out_independent_copies():
    source = CanonicalImage.from_pil(Image.new("RGB", (4, 3), (10, 20, 30)), source_format="PNG")
    assert source.pixels[:4] == bytes([10, 20, 30, 255])

    arr = source.to_array()
    arr[..., 3] = 0
    image = source.to_pil()
    image.putpixel((0, 0), (0, 0, 0, 0))

    assert np.all(source.to_array()[..., 3] == 255)
    assert source.to_array().shape == (3, 4, 4)
