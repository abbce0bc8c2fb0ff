from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


SUPPORTED_SUFFIXES = (".md", ".markdown", ".txt", ".text")
DIVIDER_MARKER = "---"
TITLE_PATTERN = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)
RULE_PATTERN = re.compile(r"^[ \t]*([-*_])(?:[ \t]*\1){2,}[ \t]*$", re.MULTILINE)


@dataclass(frozen=True)
class SourceText:
    content: str
    title: Optional[str]


def remove_front_matter(markdown: str) -> str:
    stripped = markdown.lstrip()
    if stripped.startswith("---"):
        match = re.match(r"^---\s*\n.*?\n---\s*\n?", stripped, flags=re.DOTALL)
        if match:
            return stripped[match.end() :]
    return markdown


def extract_title(markdown: str, fallback: Optional[str] = None) -> Optional[str]:
    match = TITLE_PATTERN.search(remove_front_matter(markdown))
    if match:
        return match.group(1).strip()
    return fallback


def clean_markdown(markdown: str) -> str:
    text = remove_front_matter(markdown.replace("\r\n", "\n"))

    # Remove fenced code blocks.
    text = re.sub(r"```[\s\S]*?```", "", text)
    # Horizontal rules become stand-alone divider paragraphs.
    text = RULE_PATTERN.sub(f"\n{DIVIDER_MARKER}\n", text)
    # Drop images entirely.
    text = re.sub(r"!\[[^\]]*\]\([^\)]*\)", "", text)
    text = re.sub(r"!\[\[[^\]]*\]\]", "", text)
    # Convert links to their visible text.
    text = re.sub(r"\[([^\]]+)\]\([^\)]*\)", r"\1", text)
    # Remove inline code markers.
    text = re.sub(r"`([^`]*)`", r"\1", text)
    # Strip heading markers.
    text = re.sub(r"^#{1,6}\s*", "", text, flags=re.MULTILINE)
    # Replace list markers with a bullet character.
    text = re.sub(r"^[ \t]*[-*+][ \t]+", "• ", text, flags=re.MULTILINE)
    # Bold/italic markers.
    text = re.sub(r"\*\*([^*]+)\*\*", r"\1", text)
    text = re.sub(r"\*([^*]+)\*", r"\1", text)
    text = re.sub(r"__([^_]+)__", r"\1", text)
    text = re.sub(r"(?<!\w)_([^_]+)_(?!\w)", r"\1", text)
    # Strip trailing spaces.
    text = re.sub(r"[ \t]+\n", "\n", text)
    # Collapse multiple blank lines.
    text = re.sub(r"\n{3,}", "\n\n", text)

    return text.strip()


def read_text_file(path: Path) -> SourceText:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported file type '{path.suffix}'. "
            f"Use one of {', '.join(SUPPORTED_SUFFIXES)}."
        )
    raw = path.read_text(encoding="utf-8")
    return SourceText(
        content=clean_markdown(raw),
        title=extract_title(raw, fallback=path.stem),
    )
