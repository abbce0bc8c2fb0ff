from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple


DIVIDER_PATTERN = re.compile(r"^[-*_]{3,}$")
SENTENCE_TERMINATORS = "。！？；.!?"
SENTENCE_SPLIT_PATTERN = re.compile(f"([{re.escape(SENTENCE_TERMINATORS)}]+)")
PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n[ \t]*\n")


@dataclass(frozen=True)
class Block:
    """One unit of page content.

    ``source`` is the index of the paragraph the block came from. A whole
    paragraph is a single block; when a paragraph has to be broken up, each
    sentence becomes a block with the same ``source``.
    """

    text: str
    source: int
    divider: bool = False


def normalize_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    # Whitespace-only lines count as blank.
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def is_divider(paragraph: str) -> bool:
    return bool(DIVIDER_PATTERN.fullmatch(paragraph.strip()))


def split_paragraphs(text: str) -> List[str]:
    normalized = normalize_text(text)
    if not normalized:
        return []
    return [p.strip() for p in PARAGRAPH_SPLIT_PATTERN.split(normalized) if p.strip()]


def split_sentences(paragraph: str) -> List[str]:
    """Split on sentence terminators, keeping each run of terminators with
    the sentence before it. Joining the result gives back ``paragraph``."""
    parts = SENTENCE_SPLIT_PATTERN.split(paragraph)
    sentences: List[str] = []
    for i in range(0, len(parts), 2):
        sentence = parts[i] + (parts[i + 1] if i + 1 < len(parts) else "")
        if sentence.strip():
            sentences.append(sentence)
        elif sentence and sentences:
            sentences[-1] += sentence
    return sentences or [paragraph]


def paragraph_blocks(paragraphs: Sequence[str]) -> List[Block]:
    return [
        Block(text=paragraph, source=index, divider=is_divider(paragraph))
        for index, paragraph in enumerate(paragraphs)
    ]


def sentence_blocks(block: Block) -> List[Block]:
    if block.divider:
        return [block]
    return [
        Block(text=sentence, source=block.source)
        for sentence in split_sentences(block.text)
    ]


def group_blocks(blocks: Iterable[Block]) -> List[Tuple[str, bool]]:
    """Merge consecutive blocks of the same paragraph.

    Returns ``(text, is_divider)`` pairs in order, one per rendered paragraph.
    """
    grouped: List[Tuple[str, bool]] = []
    last_source = None
    for block in blocks:
        if block.divider:
            grouped.append((block.text.strip(), True))
            last_source = None
            continue
        if grouped and block.source == last_source:
            text, _ = grouped[-1]
            grouped[-1] = (text + block.text, False)
        else:
            grouped.append((block.text, False))
        last_source = block.source
    return [(text.strip(), divider) for text, divider in grouped]
