from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .presets import (
    DEFAULT_FONT_SIZE,
    DEFAULT_RATIO,
    DEFAULT_THEME,
    Dimensions,
    FontScale,
    Theme,
    resolve_dimensions,
    resolve_font_scale,
    resolve_theme,
)


DEFAULT_SAFETY_MARGIN = 30
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_COVER_MIME_TYPE = "image/png"
TRUE_STRINGS = ("true", "1", "yes", "on")
FALSE_STRINGS = ("false", "0", "no", "off", "")


def parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in TRUE_STRINGS:
            return True
        if key in FALSE_STRINGS:
            return False
        raise ValueError(f"Cannot read '{value}' as true or false.")
    if isinstance(value, int):
        return value != 0
    raise ValueError(f"Cannot read {value!r} as true or false.")


@dataclass(frozen=True)
class RenderOptions:
    """Configuration shared by measurement and composition.

    The same instance must reach both passes: a page measured with one theme
    or font scale and composed with another will not match.
    """

    theme: str = DEFAULT_THEME
    ratio: str = DEFAULT_RATIO
    font_size: str = DEFAULT_FONT_SIZE
    title: Optional[str] = None
    show_cover: bool = False
    cover_image: Optional[str] = None
    cover_mime_type: str = DEFAULT_COVER_MIME_TYPE
    safety_margin: float = DEFAULT_SAFETY_MARGIN
    timeout_ms: float = DEFAULT_TIMEOUT_MS

    def __post_init__(self) -> None:
        # Fail on bad ratio / font size at construction, not mid-job.
        resolve_dimensions(self.ratio)
        resolve_font_scale(self.font_size)
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive.")

    @property
    def theme_preset(self) -> Theme:
        return resolve_theme(self.theme)

    @property
    def dimensions(self) -> Dimensions:
        return resolve_dimensions(self.ratio)

    @property
    def font_scale(self) -> FontScale:
        return resolve_font_scale(self.font_size)

    @property
    def has_title_chrome(self) -> bool:
        return bool(self.show_cover and self.title and self.title.strip())

    @property
    def has_cover_banner(self) -> bool:
        return self.has_title_chrome and bool(self.cover_image)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "RenderOptions":
        """Build options from a tool-call style bundle.

        Accepts ``theme``, ``ratio``, ``fontSize``, ``title``, ``showCover``
        and ``aiCoverImage``; snake_case spellings work too.
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in config and config[key] is not None:
                    return config[key]
            return default

        return cls(
            theme=pick("theme", default=DEFAULT_THEME),
            ratio=pick("ratio", default=DEFAULT_RATIO),
            font_size=pick("fontSize", "font_size", default=DEFAULT_FONT_SIZE),
            title=pick("title"),
            show_cover=parse_flag(pick("showCover", "show_cover", default=False)),
            cover_image=pick("aiCoverImage", "cover_image"),
            cover_mime_type=pick(
                "aiCoverMimeType", "cover_mime_type", default=DEFAULT_COVER_MIME_TYPE
            ),
            safety_margin=pick("safetyMargin", "safety_margin", default=DEFAULT_SAFETY_MARGIN),
            timeout_ms=pick("timeoutMs", "timeout_ms", default=DEFAULT_TIMEOUT_MS),
        )
