"""
Measured pagination.

Text is split into paragraphs, the content budget of a page is measured once
for the first page and once for the rest, and page breaks are found by
rendering candidate pages. A paragraph too tall for a page on its own is
broken into sentences; a sentence that is still too tall gets a page to
itself and may overflow.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .measure import Budgets, measure_budgets
from .options import RenderOptions
from .page_break import largest_fitting_prefix
from .renderer import BrowserPool, LayoutRenderer, PlaywrightRenderer
from .segment import Block, group_blocks, paragraph_blocks, sentence_blocks, split_paragraphs


@dataclass(frozen=True)
class Page:
    page_number: int
    is_first: bool
    is_last: bool
    blocks: Tuple[Block, ...]

    @property
    def paragraphs(self) -> Tuple[str, ...]:
        return tuple(text for text, _ in group_blocks(self.blocks))

    @property
    def content(self) -> str:
        return "\n\n".join(self.paragraphs)

    @property
    def has_divider(self) -> bool:
        return any(block.divider for block in self.blocks)


async def _place_blocks(
    renderer: LayoutRenderer,
    blocks: List[Block],
    cursor: int,
    budgets: Budgets,
    options: RenderOptions,
    page_number: int,
    debug: bool = False,
) -> Tuple[List[Block], int]:
    is_first = page_number == 1
    budget = budgets.for_page(is_first)
    chrome = budgets.chrome_for_page(is_first)

    count = await largest_fitting_prefix(
        renderer, blocks, cursor, budget, options, chrome, page_number
    )
    if count > 0:
        return blocks, count

    sentences = sentence_blocks(blocks[cursor])
    if len(sentences) > 1:
        if debug:
            print(
                f"[DEBUG] Page {page_number}: paragraph {blocks[cursor].source + 1} "
                f"overflows a page, splitting into {len(sentences)} sentences"
            )
        blocks = blocks[:cursor] + sentences + blocks[cursor + 1 :]
        count = await largest_fitting_prefix(
            renderer, blocks, cursor, budget, options, chrome, page_number
        )

    if count == 0:
        if debug:
            print(f"[DEBUG] Page {page_number}: single block overflows, placing it alone")
        count = 1
    return blocks, count


async def paginate(
    text: str,
    options: RenderOptions,
    renderer: LayoutRenderer,
    debug: bool = False,
) -> List[Page]:
    paragraphs = split_paragraphs(text)
    if not paragraphs:
        return []

    budgets = await measure_budgets(renderer, options, debug=debug)
    blocks = paragraph_blocks(paragraphs)

    groups: List[List[Block]] = []
    cursor = 0
    while cursor < len(blocks):
        page_number = len(groups) + 1
        blocks, count = await _place_blocks(
            renderer, blocks, cursor, budgets, options, page_number, debug=debug
        )
        groups.append(blocks[cursor : cursor + count])
        if debug:
            print(f"[DEBUG] Page {page_number}: {count} block(s) from index {cursor}")
        cursor += count

    total = len(groups)
    return [
        Page(
            page_number=index,
            is_first=index == 1,
            is_last=index == total,
            blocks=tuple(group),
        )
        for index, group in enumerate(groups, start=1)
    ]


def paginate_sync(
    text: str,
    options: RenderOptions,
    renderer: Optional[LayoutRenderer] = None,
    debug: bool = False,
) -> List[Page]:
    async def run() -> List[Page]:
        active = renderer or PlaywrightRenderer(BrowserPool(debug=debug), debug=debug)
        try:
            return await paginate(text, options, active, debug=debug)
        finally:
            if renderer is None:
                await active.close()

    return asyncio.run(run())
