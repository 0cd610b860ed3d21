import io
import json
import zipfile
from datetime import datetime

import pytest

from favicongen.models.icon_model import AppMetadata
from favicongen.services.package_service import MANIFEST_PATH, README_PATH, PackageService

METADATA = AppMetadata(app_name="Demo App", short_name="Demo", theme_color="#123456")
STAMP = datetime(2024, 5, 17, 9, 30, 0)


@pytest.fixture
def service():
    return PackageService()


def test_manifest_fields(service):
    manifest = json.loads(service.build_manifest(METADATA))
    assert manifest["name"] == "Demo App"
    assert manifest["short_name"] == "Demo"
    assert manifest["theme_color"] == manifest["background_color"] == "#123456"
    assert manifest["display"] == "standalone"
    assert [icon["sizes"] for icon in manifest["icons"]] == ["192x192", "512x512"]


def test_manifest_keeps_non_ascii_names(service):
    manifest = service.build_manifest(AppMetadata(app_name="Моё приложение"))
    assert "Моё приложение".encode("utf-8") in manifest


def test_snippets_carry_metadata(service):
    nextjs = service.nextjs_metadata_snippet(METADATA)
    html = service.html_head_tags(METADATA)
    assert 'title: "Demo App"' in nextjs
    assert '"theme-color": "#123456"' in nextjs
    assert '<meta name="theme-color" content="#123456">' in html
    assert 'href="/favicon.ico"' in html


def test_readme_lists_files_and_radius(service, red_bundle):
    readme = service.build_readme(red_bundle, METADATA, STAMP)
    for path in red_bundle.files():
        assert f"- {path}" in readme
    assert f"- {MANIFEST_PATH}" in readme
    assert "Радиус скругления: 40px (для превью 192px)" in readme
    assert "Радиус при 512px: 107px" in readme
    assert "Создано: 2024-05-17 09:30:00" in readme


def test_archive_contains_bundle_manifest_and_readme(service, red_bundle):
    archive = zipfile.ZipFile(io.BytesIO(service.build_archive(red_bundle, METADATA, STAMP)))
    names = archive.namelist()

    assert set(names) == set(red_bundle.files()) | {MANIFEST_PATH, README_PATH}
    for path, data in red_bundle.files().items():
        assert archive.read(path) == data
    assert json.loads(archive.read(MANIFEST_PATH))["name"] == "Demo App"
    assert "Demo App" in archive.read(README_PATH).decode("utf-8")


def test_archive_is_reproducible_for_same_timestamp(service, red_bundle):
    assert service.build_archive(red_bundle, METADATA, STAMP) == service.build_archive(red_bundle, METADATA, STAMP)


def test_archive_name(service):
    assert service.archive_name(STAMP) == "favicons-2024-05-17.zip"
