from __future__ import annotations

import base64
import io
from typing import List, Sequence

from PIL import Image, UnidentifiedImageError

from .errors import CompositionError, RenderError
from .markup import CHROME_NONE, build_page_html, first_page_chrome
from .options import RenderOptions
from .paginator import Page
from .renderer import LayoutRenderer


def page_chrome(page: Page, options: RenderOptions) -> str:
    return first_page_chrome(options) if page.is_first else CHROME_NONE


def page_html(page: Page, total_pages: int, options: RenderOptions) -> str:
    return build_page_html(
        page.blocks,
        options,
        page.page_number,
        total_pages,
        page_chrome(page, options),
    )


def decode_png(data: bytes, page_number: int, options: RenderOptions) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise CompositionError(page_number, "screenshot is not a readable image", exc) from exc
    expected = (options.dimensions.width, options.dimensions.height)
    if image.size != expected:
        raise CompositionError(
            page_number,
            f"screenshot is {image.width}x{image.height}, expected {expected[0]}x{expected[1]}",
        )
    return image.convert("RGB")


async def compose_page(
    page: Page,
    total_pages: int,
    options: RenderOptions,
    renderer: LayoutRenderer,
) -> Image.Image:
    html = page_html(page, total_pages, options)
    try:
        data = await renderer.rasterize(html, options.dimensions, timeout_ms=options.timeout_ms)
    except RenderError as exc:
        raise CompositionError(page.page_number, str(exc), exc) from exc
    return decode_png(data, page.page_number, options)


async def compose_pages(
    pages: Sequence[Page],
    options: RenderOptions,
    renderer: LayoutRenderer,
    debug: bool = False,
) -> List[Image.Image]:
    images: List[Image.Image] = []
    total = len(pages)
    for page in pages:
        image = await compose_page(page, total, options, renderer)
        images.append(image)
        if debug:
            print(
                f"[DEBUG] Rendered page {page.page_number}/{total} "
                f"({page_chrome(page, options)} chrome, {len(page.paragraphs)} paragraph(s))"
            )
    return images


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def encode_base64(image: Image.Image) -> str:
    return base64.b64encode(encode_png(image)).decode("ascii")
