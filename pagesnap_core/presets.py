"""
Static lookup tables for card rendering: themes, canvas sizes, font scales.

Every table is fixed for the lifetime of the process. Stylesheets live next
to this module under ``styles/`` and are read once per theme.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple


DEFAULT_THEME = "minimal"
DEFAULT_RATIO = "3:4"
DEFAULT_FONT_SIZE = "medium"
CANVAS_WIDTH = 1080


@dataclass(frozen=True)
class Theme:
    name: str
    label: str
    description: str
    background: str
    text: str
    accent: str

    @property
    def stylesheet(self) -> str:
        return f"{self.name}.css"


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def as_viewport(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class FontScale:
    name: str
    title_px: int
    body_px: int


THEMES: Dict[str, Theme] = {
    "minimal": Theme(
        name="minimal",
        label="Minimal",
        description=(
            "Clean white background with black text. "
            "Best for knowledge, tips, and informational content."
        ),
        background="#ffffff",
        text="#1a1a1a",
        accent="#ff2442",
    ),
    "elegant": Theme(
        name="elegant",
        label="Elegant",
        description=(
            "Warm beige background with serif font. "
            "Best for novels, essays, and literary content."
        ),
        background="#faf8f5",
        text="#2c2c2c",
        accent="#c9a86c",
    ),
    "warm": Theme(
        name="warm",
        label="Warm",
        description=(
            "Warm gradient with card style. "
            "Best for lifestyle, emotional, and personal content."
        ),
        background="#fff9f0",
        text="#3d3d3d",
        accent="#ff6b6b",
    ),
    "dark": Theme(
        name="dark",
        label="Dark",
        description=(
            "Dark mode for eye comfort. "
            "Best for night reading and tech content."
        ),
        background="#1a1a2e",
        text="#eaeaea",
        accent="#00d4ff",
    ),
}

DIMENSIONS: Dict[str, Dimensions] = {
    "3:4": Dimensions(CANVAS_WIDTH, 1440),
    "1:1": Dimensions(CANVAS_WIDTH, 1080),
    "4:3": Dimensions(CANVAS_WIDTH, 810),
}

FONT_SCALES: Dict[str, FontScale] = {
    "small": FontScale("small", title_px=36, body_px=24),
    "medium": FontScale("medium", title_px=42, body_px=28),
    "large": FontScale("large", title_px=48, body_px=32),
}

THEME_NAMES: Tuple[str, ...] = tuple(THEMES)
RATIO_NAMES: Tuple[str, ...] = tuple(DIMENSIONS)
FONT_SIZE_NAMES: Tuple[str, ...] = tuple(FONT_SCALES)


def _styles_dir() -> Path:
    return Path(__file__).resolve().parent / "styles"


def resolve_theme(name: Optional[str]) -> Theme:
    key = (name or "").strip().lower()
    return THEMES.get(key, THEMES[DEFAULT_THEME])


def resolve_dimensions(ratio: Optional[str]) -> Dimensions:
    key = (ratio or DEFAULT_RATIO).strip()
    if key not in DIMENSIONS:
        raise ValueError(
            f"Unsupported ratio '{ratio}'. Use one of {', '.join(RATIO_NAMES)}."
        )
    return DIMENSIONS[key]


def resolve_font_scale(name: Optional[str]) -> FontScale:
    key = (name or DEFAULT_FONT_SIZE).strip().lower()
    if key not in FONT_SCALES:
        raise ValueError(
            f"Unsupported font size '{name}'. Use one of {', '.join(FONT_SIZE_NAMES)}."
        )
    return FONT_SCALES[key]


@lru_cache(maxsize=None)
def load_theme_css(name: str) -> str:
    theme = resolve_theme(name)
    path = _styles_dir() / theme.stylesheet
    if not path.exists():
        path = _styles_dir() / THEMES[DEFAULT_THEME].stylesheet
    return path.read_text(encoding="utf-8")


def describe_themes() -> Dict[str, Dict[str, object]]:
    return {
        theme.name: {
            "name": theme.label,
            "description": theme.description,
            "colors": {
                "background": theme.background,
                "text": theme.text,
                "accent": theme.accent,
            },
        }
        for theme in THEMES.values()
    }
