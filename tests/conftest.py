"""
Shared fixtures.

``FakeRenderer`` stands in for Chromium: it reads the card markup and lays it
out with a fixed-width-font model (line count from character count), so the
pagination and composition code runs without a browser and with exactly
predictable page breaks.
"""

from __future__ import annotations

import base64
import html as html_lib
import io
import math
import re
from typing import List, Optional, Sequence, Tuple

import pytest
from PIL import Image

from pagesnap_core.errors import MeasurementError, RenderError
from pagesnap_core.options import DEFAULT_TIMEOUT_MS
from pagesnap_core.presets import Dimensions
from pagesnap_core.renderer import LayoutRenderer


CONTENT_RE = re.compile(
    r'<div class="content">(.*?)</div>\s*<div class="page-number">', re.DOTALL
)
ITEM_RE = re.compile(r'<p>(.*?)</p>|<hr class="divider" />', re.DOTALL)
FONT_RE = re.compile(r"\.content \{ font-size: (\d+)px; \}")
PAGE_NUMBER_RE = re.compile(r"<span>(\d+)</span> / (\d+)")


class FakeRenderer(LayoutRenderer):
    PADDING = 80
    FOOTER = 60
    TITLE = 120
    BANNER = 200
    DIVIDER = 40
    TEXT_WIDTH = 980

    def __init__(
        self,
        fail_on_page: Optional[int] = None,
        screenshot_size: Optional[Tuple[int, int]] = None,
        corrupt: bool = False,
        content_height: Optional[float] = None,
    ) -> None:
        self.fail_on_page = fail_on_page
        self.screenshot_size = screenshot_size
        self.corrupt = corrupt
        self.content_height = content_height
        self.measure_calls: List[Tuple[str, bool]] = []
        self.rasterize_calls: List[str] = []
        self.closed = False

    @staticmethod
    def body_px(html: str) -> int:
        match = FONT_RE.search(html)
        return int(match.group(1)) if match else 28

    def chrome_height(self, html: str) -> int:
        if 'class="title-banner"' in html:
            return self.BANNER
        if '<h1 class="title">' in html:
            return self.TITLE
        return 0

    def paragraph_height(self, text: str, body_px: int) -> float:
        chars_per_line = self.TEXT_WIDTH // body_px
        line_height = body_px * 2
        lines = 0
        for line in text.split("<br />"):
            lines += max(1, math.ceil(len(html_lib.unescape(line)) / chars_per_line))
        return lines * line_height + body_px

    def layout_height(self, html: str) -> float:
        match = CONTENT_RE.search(html)
        body_px = self.body_px(html)
        total = 0.0
        for item in ITEM_RE.finditer(match.group(1)):
            if item.group(1) is None:
                total += self.DIVIDER
            else:
                total += self.paragraph_height(item.group(1), body_px)
        return total

    async def measure(
        self,
        html: str,
        dimensions: Dimensions,
        selector: str = ".content",
        *,
        intrinsic: bool = False,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> float:
        self.measure_calls.append((html, intrinsic))
        if not CONTENT_RE.search(html):
            raise MeasurementError(f"Element '{selector}' not found in measured page")
        if intrinsic:
            return self.layout_height(html)
        if self.content_height is not None:
            return self.content_height
        return dimensions.height - self.PADDING - self.FOOTER - self.chrome_height(html)

    async def rasterize(
        self,
        html: str,
        dimensions: Dimensions,
        *,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> bytes:
        self.rasterize_calls.append(html)
        page_number = int(PAGE_NUMBER_RE.search(html).group(1))
        if self.fail_on_page == page_number:
            raise RenderError("Rasterization failed: target closed")
        if self.corrupt:
            return b"not a png"
        size = self.screenshot_size or (dimensions.width, dimensions.height)
        return png_bytes(size)

    async def close(self) -> None:
        self.closed = True


def png_bytes(size: Tuple[int, int], color: str = "#ffffff") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_text(paragraphs: Sequence[str]) -> str:
    return "\n\n".join(paragraphs)


def filler(index: int, length: int = 70) -> str:
    prefix = f"Paragraph {index}: "
    return (prefix + "x" * length)[:length]


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def cover_base64() -> str:
    return base64.b64encode(png_bytes((8, 8), "#336699")).decode("ascii")
