from __future__ import annotations

from typing import Sequence

from .markup import CHROME_NONE, CONTENT_SELECTOR, build_page_html
from .options import RenderOptions
from .renderer import LayoutRenderer
from .segment import Block


async def content_height(
    renderer: LayoutRenderer,
    blocks: Sequence[Block],
    options: RenderOptions,
    chrome: str = CHROME_NONE,
    page_number: int = 1,
) -> float:
    html = build_page_html(blocks, options, page_number, page_number, chrome)
    return await renderer.measure(
        html,
        options.dimensions,
        CONTENT_SELECTOR,
        intrinsic=True,
        timeout_ms=options.timeout_ms,
    )


async def fits(
    renderer: LayoutRenderer,
    blocks: Sequence[Block],
    options: RenderOptions,
    budget: float,
    chrome: str = CHROME_NONE,
    page_number: int = 1,
) -> bool:
    height = await content_height(renderer, blocks, options, chrome, page_number)
    return height <= budget


async def largest_fitting_prefix(
    renderer: LayoutRenderer,
    blocks: Sequence[Block],
    start: int,
    budget: float,
    options: RenderOptions,
    chrome: str = CHROME_NONE,
    page_number: int = 1,
) -> int:
    """Binary search for the most blocks from ``start`` that fit ``budget``.

    Returns 0 when even the first block overflows.
    """
    remaining = len(blocks) - start
    if start < 0 or remaining <= 0:
        raise ValueError(
            f"No blocks left to place (start={start}, total={len(blocks)})."
        )

    low, high = 1, remaining
    best = 0
    while low <= high:
        mid = (low + high) // 2
        probe = blocks[start : start + mid]
        if await fits(renderer, probe, options, budget, chrome, page_number):
            best = mid
            low = mid + 1
        else:
            high = mid - 1
    return best


async def find_page_break(
    renderer: LayoutRenderer,
    blocks: Sequence[Block],
    start: int,
    budget: float,
    options: RenderOptions,
    chrome: str = CHROME_NONE,
    page_number: int = 1,
) -> int:
    """Return how many blocks starting at ``start`` go on the next page.

    The answer is the largest count whose rendered content is no taller than
    ``budget``, and never less than 1: a block that overflows a whole page
    still gets a page of its own so pagination always moves forward.
    """
    best = await largest_fitting_prefix(
        renderer, blocks, start, budget, options, chrome, page_number
    )
    return max(best, 1)
