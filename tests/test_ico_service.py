import io
import struct

import pytest
from PIL import Image

from conftest import encode
from favicongen.models.errors import EncodeError
from favicongen.models.icon_model import ContainerEntry
from favicongen.services.ico_service import IcoService


def entry(size, color=(255, 0, 0, 255)):
    width, height = size if isinstance(size, tuple) else (size, size)
    return ContainerEntry(width=width, height=height, data=encode(Image.new("RGBA", (width, height), color)))


@pytest.fixture
def service():
    return IcoService()


def test_header_and_directory_layout(service):
    entries = [entry(16), entry(32), entry(48)]
    container = service.encode(entries)

    assert container[:6] == b"\x00\x00\x01\x00\x03\x00"

    offset = 6 + 16 * 3
    for index, item in enumerate(entries):
        record = container[6 + 16 * index: 6 + 16 * (index + 1)]
        width, height, colors, reserved, planes, bpp, size, data_offset = struct.unpack("<BBBBHHII", record)
        assert (width, height, colors, reserved, planes, bpp) == (item.width, item.height, 0, 0, 1, 32)
        assert size == len(item.data)
        assert data_offset == offset
        assert container[data_offset:data_offset + size] == item.data
        offset += size
    assert len(container) == offset


def test_round_trip_preserves_caller_order(service):
    entries = [entry(48), entry(16), entry((32, 24))]
    decoded = service.decode(service.encode(entries))

    assert [(e.width, e.height) for e in decoded] == [(48, 48), (16, 16), (32, 24)]
    for item in decoded:
        assert item.bit_depth == 32
        assert Image.open(io.BytesIO(item.data)).size == (item.width, item.height)
    assert [e.data for e in decoded] == [e.data for e in entries]


def test_256_is_stored_as_zero(service):
    container = service.encode([entry(256)])
    assert container[6:8] == b"\x00\x00"
    assert (service.decode(container)[0].width, service.decode(container)[0].height) == (256, 256)


def test_pillow_reads_the_container(service):
    container = service.encode([entry(16), entry(32), entry(48)])
    icon = Image.open(io.BytesIO(container))
    assert icon.format == "ICO"
    assert set(icon.info["sizes"]) == {(16, 16), (32, 32), (48, 48)}


def test_encoding_is_deterministic(service):
    entries = [entry(16), entry(32)]
    assert service.encode(entries) == service.encode(list(entries))


def test_empty_container_rejected(service):
    with pytest.raises(EncodeError):
        service.encode([])


def test_declared_size_must_match_payload(service):
    wrong = ContainerEntry(width=32, height=32, data=entry(16).data)
    with pytest.raises(EncodeError, match="16x16"):
        service.encode([entry(16), wrong])


@pytest.mark.parametrize("size", [0, 257, 1200])
def test_out_of_range_dimensions_rejected(service, size):
    with pytest.raises(EncodeError):
        service.encode([ContainerEntry(width=size, height=16, data=b"")])


def test_non_image_payload_rejected(service):
    with pytest.raises(EncodeError):
        service.encode([ContainerEntry(width=16, height=16, data=b"garbage")])


@pytest.mark.parametrize(
    "container",
    [b"\x00\x00", b"\x00\x00\x02\x00\x01\x00" + b"\x00" * 16, b"\x00\x00\x01\x00\x02\x00" + b"\x00" * 16],
)
def test_decode_rejects_broken_containers(service, container):
    with pytest.raises(EncodeError):
        service.decode(container)


def test_decode_rejects_payload_past_end(service):
    container = bytearray(service.encode([entry(16)]))
    struct.pack_into("<I", container, 6 + 8, len(container))
    with pytest.raises(EncodeError):
        service.decode(bytes(container))
