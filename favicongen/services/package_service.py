"""Упаковка результата: манифест, README, фрагменты кода и ZIP-архив.

Принципы:
- SRP: работает только с готовыми байтами набора и метаданными, пиксели не трогает.
"""
from __future__ import annotations

import io
import json
import zipfile
from datetime import datetime
from typing import Optional

from favicongen.models.icon_model import AppMetadata, IconBundle

MANIFEST_PATH = "public/site.webmanifest"
README_PATH = "README.txt"
DISPLAY_SIZE = 512


class PackageService:
    def build_manifest(self, metadata: AppMetadata) -> bytes:
        """Содержимое site.webmanifest (JSON с отступом 2)."""
        manifest = {
            "name": metadata.app_name,
            "short_name": metadata.short_name,
            "icons": [
                {"src": "/android-chrome-192x192.png", "sizes": "192x192", "type": "image/png"},
                {"src": "/android-chrome-512x512.png", "sizes": "512x512", "type": "image/png"},
            ],
            "theme_color": metadata.theme_color,
            "background_color": metadata.theme_color,
            "display": "standalone",
        }
        return json.dumps(manifest, indent=2, ensure_ascii=False).encode("utf-8")

    def nextjs_metadata_snippet(self, metadata: AppMetadata) -> str:
        """Объект metadata для src/app/layout.tsx."""
        return f"""import type {{ Metadata }} from "next";

export const metadata: Metadata = {{
  title: "{metadata.app_name}",
  description: "Your app description",
  icons: {{
    icon: [
      {{ url: "/favicon.ico", sizes: "any" }},
      {{ url: "/favicon-16x16.png", sizes: "16x16", type: "image/png" }},
      {{ url: "/favicon-32x32.png", sizes: "32x32", type: "image/png" }},
      {{ url: "/favicon-48x48.png", sizes: "48x48", type: "image/png" }},
    ],
    apple: [
      {{ url: "/apple-touch-icon.png", sizes: "180x180", type: "image/png" }},
    ],
  }},
  manifest: "/site.webmanifest",
  openGraph: {{
    images: [{{ url: "/opengraph-image.png", width: 1200, height: 630 }}],
  }},
  other: {{
    "theme-color": "{metadata.theme_color}",
    "msapplication-TileColor": "{metadata.theme_color}",
  }},
}};
"""

    def html_head_tags(self, metadata: AppMetadata) -> str:
        """Теги для <head> обычного сайта."""
        return f"""<!-- Favicon -->
<link rel="icon" type="image/x-icon" href="/favicon.ico">
<link rel="icon" type="image/png" sizes="16x16" href="/favicon-16x16.png">
<link rel="icon" type="image/png" sizes="32x32" href="/favicon-32x32.png">
<link rel="icon" type="image/png" sizes="48x48" href="/favicon-48x48.png">

<!-- Apple Touch Icon -->
<link rel="apple-touch-icon" sizes="180x180" href="/apple-touch-icon.png">

<!-- Android Chrome -->
<link rel="icon" type="image/png" sizes="192x192" href="/android-chrome-192x192.png">
<link rel="icon" type="image/png" sizes="512x512" href="/android-chrome-512x512.png">

<!-- Web Manifest & OGP -->
<link rel="manifest" href="/site.webmanifest">
<meta property="og:image" content="/opengraph-image.png">

<!-- Theme Color -->
<meta name="theme-color" content="{metadata.theme_color}">
<meta name="msapplication-TileColor" content="{metadata.theme_color}">
"""

    def build_readme(self, bundle: IconBundle, metadata: AppMetadata, generated_at: Optional[datetime] = None) -> str:
        generated_at = generated_at or datetime.now()
        policy = bundle.radius_policy
        display_radius = policy.effective_radius(DISPLAY_SIZE, DISPLAY_SIZE)
        files = "\n".join(f"- {path}" for path in sorted([*bundle.files(), MANIFEST_PATH]))
        return f"""Favicon Generator — набор иконок для сайта
========================================

Файлы в архиве:
{files}

src/app/ — файлы, которые Next.js App Router находит автоматически
(icon.png 32x32, apple-icon.png 180x180, favicon.ico).
public/ — статические файлы: PNG всех размеров, favicon.ico (16, 32, 48),
site.webmanifest и opengraph-image.png (1200x630).

========================================
Как подключить
========================================

1. Распакуйте архив.
2. Скопируйте содержимое src/app/ в src/app/ проекта.
3. Скопируйте содержимое public/ в public/ проекта.
4. Добавьте (или объедините) metadata в src/app/layout.tsx:

{self.nextjs_metadata_snippet(metadata)}
Для сайта без Next.js добавьте в <head>:

{self.html_head_tags(metadata)}
========================================
Параметры
========================================
Название: {metadata.app_name}
Краткое название: {metadata.short_name}
Цвет темы: {metadata.theme_color}
Радиус скругления: {policy.base_radius}px (для превью {policy.reference_size}px)
Радиус при {DISPLAY_SIZE}px: {display_radius}px

Создано: {generated_at:%Y-%m-%d %H:%M:%S}
"""

    def build_archive(
        self, bundle: IconBundle, metadata: AppMetadata, generated_at: Optional[datetime] = None
    ) -> bytes:
        """ZIP со всеми файлами набора, манифестом и README."""
        generated_at = generated_at or datetime.now()
        # фиксированная метка времени внутри архива: одинаковый набор даёт одинаковые байты
        stamp = generated_at.timetuple()[:6]
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path, data in bundle.files().items():
                archive.writestr(zipfile.ZipInfo(path, date_time=stamp), data, compress_type=zipfile.ZIP_DEFLATED)
            archive.writestr(
                zipfile.ZipInfo(MANIFEST_PATH, date_time=stamp),
                self.build_manifest(metadata),
                compress_type=zipfile.ZIP_DEFLATED,
            )
            archive.writestr(
                zipfile.ZipInfo(README_PATH, date_time=stamp),
                self.build_readme(bundle, metadata, generated_at).encode("utf-8"),
                compress_type=zipfile.ZIP_DEFLATED,
            )
        return buffer.getvalue()

    def archive_name(self, generated_at: Optional[datetime] = None) -> str:
        generated_at = generated_at or datetime.now()
        return f"favicons-{generated_at:%Y-%m-%d}.zip"
