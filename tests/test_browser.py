"""
Smoke tests against real headless Chromium.

Skipped unless Playwright's Chromium is installed (`playwright install chromium`).
"""
import pytest

from pagesnap_core.compositor import compose_pages
from pagesnap_core.errors import RenderError
from pagesnap_core.markup import CHROME_NONE, build_placeholder_html
from pagesnap_core.options import RenderOptions
from pagesnap_core.paginator import paginate
from pagesnap_core.renderer import BrowserPool, PlaywrightRenderer

from .conftest import make_text

pytestmark = pytest.mark.browser


@pytest.mark.asyncio
async def test_measure_and_compose_with_chromium():
    renderer = PlaywrightRenderer(BrowserPool())
    options = RenderOptions(title="Smoke test", show_cover=True)
    try:
        try:
            height = await renderer.measure(
                build_placeholder_html(options, CHROME_NONE), options.dimensions
            )
        except RenderError as exc:
            pytest.skip(f"Chromium unavailable: {exc}")
        assert height > 0

        text = make_text(
            [f"第{i}段：这是一段用于测试分页的文字，包含中文和 English words。" * 3 for i in range(40)]
        )
        pages = await paginate(text, options, renderer)
        images = await compose_pages(pages, options, renderer)

        assert len(pages) > 1
        assert all(image.size == (1080, 1440) for image in images)
    finally:
        await renderer.close()
