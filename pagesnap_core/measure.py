"""
Content budgets: how many vertical pixels a page leaves for body text.

The stylesheets make ``.content`` grow to fill whatever the title, banner
and footer leave over, so the budget is read straight off a rendered
placeholder page instead of being added up from padding and margins.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MeasurementError
from .markup import CHROME_NONE, CONTENT_SELECTOR, build_placeholder_html, first_page_chrome
from .options import RenderOptions
from .renderer import LayoutRenderer


@dataclass(frozen=True)
class Budgets:
    first: float
    subsequent: float
    first_chrome: str = CHROME_NONE

    def for_page(self, is_first: bool) -> float:
        return self.first if is_first else self.subsequent

    def chrome_for_page(self, is_first: bool) -> str:
        return self.first_chrome if is_first else CHROME_NONE


async def measure_available_height(
    renderer: LayoutRenderer,
    options: RenderOptions,
    chrome: str = CHROME_NONE,
) -> float:
    html = build_placeholder_html(options, chrome)
    height = await renderer.measure(
        html,
        options.dimensions,
        CONTENT_SELECTOR,
        timeout_ms=options.timeout_ms,
    )
    if height <= 0:
        raise MeasurementError(
            f"Content area measured {height}px for chrome '{chrome}'; "
            "the theme stylesheet leaves no room for text."
        )
    return height - options.safety_margin


async def measure_budgets(
    renderer: LayoutRenderer,
    options: RenderOptions,
    debug: bool = False,
) -> Budgets:
    chrome = first_page_chrome(options)
    subsequent = await measure_available_height(renderer, options, CHROME_NONE)
    if chrome == CHROME_NONE:
        first = subsequent
    else:
        first = await measure_available_height(renderer, options, chrome)
    if debug:
        print(
            f"[DEBUG] Available heights - first page ({chrome}): {first:.1f}px, "
            f"other pages: {subsequent:.1f}px"
        )
    return Budgets(first=first, subsequent=subsequent, first_chrome=chrome)
