"""
Character-count page estimate.

A quick approximation of the measured paginator that needs no browser: each
ratio and font size has a conservative characters-per-page budget (counted
in CJK characters), scaled up for text with more Latin letters and digits,
which are roughly half as wide.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from .presets import resolve_dimensions, resolve_font_scale
from .segment import split_paragraphs, split_sentences


BASE_CHARS_PER_PAGE: Dict[str, Dict[str, int]] = {
    "3:4": {"small": 420, "medium": 320, "large": 240},
    "1:1": {"small": 300, "medium": 230, "large": 180},
    "4:3": {"small": 250, "medium": 200, "large": 150},
}
FALLBACK_CHARS_PER_PAGE = 350
LATIN_WIDTH_BONUS = 0.7
TITLE_PAGE_FACTOR = 0.75


def english_ratio(text: str) -> float:
    cleaned = re.sub(r"\s+", "", text)
    if not cleaned:
        return 0.0
    latin = re.findall(r"[A-Za-z0-9]", cleaned)
    return len(latin) / len(cleaned)


def chars_per_page(
    text: str,
    ratio: str,
    font_size: str,
    override: Optional[int] = None,
) -> int:
    if override:
        return override
    resolve_dimensions(ratio)
    base = BASE_CHARS_PER_PAGE.get(ratio.strip(), {}).get(
        resolve_font_scale(font_size).name, FALLBACK_CHARS_PER_PAGE
    )
    return int(base * (1 + english_ratio(text) * LATIN_WIDTH_BONUS))


def estimate_pages(
    text: str,
    ratio: str = "3:4",
    font_size: str = "medium",
    chars_per_page_override: Optional[int] = None,
    has_title: bool = False,
) -> List[str]:
    paragraphs = split_paragraphs(text)
    if not paragraphs:
        return []

    max_chars = chars_per_page(text, ratio, font_size, chars_per_page_override)
    first_max = int(max_chars * TITLE_PAGE_FACTOR) if has_title else max_chars

    chunks: List[str] = []
    current = ""
    count = 0

    def limit() -> int:
        return first_max if not chunks else max_chars

    def flush() -> None:
        nonlocal current, count
        if current.strip():
            chunks.append(current.strip())
        current = ""
        count = 0

    for para in paragraphs:
        if count + len(para) > limit() and current:
            flush()

        if len(para) <= limit():
            current += para + "\n\n"
            count += len(para)
            continue

        for sentence in split_sentences(para):
            if count + len(sentence) > limit() and current:
                flush()
            current += sentence
            count += len(sentence)
        current += "\n\n"

    flush()
    return chunks


def estimate_page_count(
    text: str,
    ratio: str = "3:4",
    font_size: str = "medium",
    chars_per_page_override: Optional[int] = None,
    has_title: bool = False,
) -> int:
    return len(
        estimate_pages(text, ratio, font_size, chars_per_page_override, has_title)
    )
