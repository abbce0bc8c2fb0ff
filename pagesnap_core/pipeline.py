from __future__ import annotations

import asyncio
import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from PIL import Image

from .compositor import compose_pages, encode_base64
from .cover import CoverImage, generate_cover_image
from .options import RenderOptions
from .paginator import Page, paginate
from .renderer import BrowserPool, LayoutRenderer, PlaywrightRenderer
from .text_source import read_text_file


DEFAULT_OUTPUT_DIR = Path("output_cards")
PAGE_FILENAME = "page-{index:02}.png"


@dataclass
class RenderResult:
    pages: List[Page]
    images: List[Image.Image]
    options: RenderOptions
    cover: Optional[CoverImage] = None
    saved_files: List[Path] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.images)

    def to_base64(self) -> List[str]:
        return [encode_base64(image) for image in self.images]


async def with_cover(
    options: RenderOptions,
    text: str,
    debug: bool = False,
    strict: bool = False,
) -> tuple[RenderOptions, Optional[CoverImage]]:
    if not options.has_title_chrome or options.cover_image:
        return options, None
    # The Imagen request is blocking; keep it off the event loop.
    cover = await asyncio.to_thread(
        generate_cover_image,
        options.title or "",
        text,
        options.theme_preset.name,
        ratio=options.ratio,
        debug=debug,
        strict=strict,
    )
    if cover is None:
        return options, None
    return (
        dataclasses.replace(options, cover_image=cover.base64, cover_mime_type=cover.mime_type),
        cover,
    )


async def render_text(
    text: str,
    options: RenderOptions,
    renderer: Optional[LayoutRenderer] = None,
    ai_cover: bool = False,
    debug: bool = False,
) -> RenderResult:
    """Paginate and compose ``text``.

    Without a ``renderer`` a private Chromium is launched for this call and
    closed before returning.
    """
    cover: Optional[CoverImage] = None
    if ai_cover:
        options, cover = await with_cover(options, text, debug=debug)

    active = renderer or PlaywrightRenderer(BrowserPool(debug=debug), debug=debug)
    try:
        pages = await paginate(text, options, active, debug=debug)
        if debug:
            print(f"[DEBUG] Produced {len(pages)} pages from text.")
        images = await compose_pages(pages, options, active, debug=debug)
    finally:
        if renderer is None:
            await active.close()
    return RenderResult(pages=pages, images=images, options=options, cover=cover)


async def render_file(
    path: Path,
    options: RenderOptions,
    renderer: Optional[LayoutRenderer] = None,
    ai_cover: bool = False,
    debug: bool = False,
) -> RenderResult:
    source = read_text_file(path)
    if not options.title and source.title:
        options = dataclasses.replace(options, title=source.title)
    return await render_text(
        source.content, options, renderer=renderer, ai_cover=ai_cover, debug=debug
    )


def ensure_output_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def build_target_directory(base_dir: Path, stem: str) -> Path:
    ensure_output_dir(base_dir)
    stem = stem or "cards"
    candidate = base_dir / stem
    if not candidate.exists():
        return candidate

    suffix = 1
    while True:
        candidate = base_dir / f"{stem}_{suffix}"
        if not candidate.exists():
            return candidate
        suffix += 1


def save_images(
    images: List[Image.Image],
    output_dir: Path,
    stem: str,
    debug: bool = False,
) -> List[Path]:
    target_directory = build_target_directory(output_dir, stem)
    ensure_output_dir(target_directory)

    output_paths: List[Path] = []
    for index, image in enumerate(images, start=1):
        output_path = target_directory / PAGE_FILENAME.format(index=index)
        image.save(output_path, format="PNG")
        output_paths.append(output_path)
        if debug:
            print(f"[DEBUG] Saved {output_path}")
    return output_paths
