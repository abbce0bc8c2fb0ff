"""
HTML for a single card.

Measurement probes and final composition both go through
:func:`build_page_html`. Any difference between the two (padding, container,
divider or footer markup) would let a page that measured as fitting overflow
once it is rendered, so there is deliberately only one builder.
"""

from __future__ import annotations

import html
from typing import Iterable, Sequence, Tuple

from .options import RenderOptions
from .presets import load_theme_css
from .segment import Block, group_blocks


CHROME_NONE = "none"
CHROME_TITLE = "title"
CHROME_BANNER = "banner"
CHROMES = (CHROME_NONE, CHROME_TITLE, CHROME_BANNER)

CONTENT_SELECTOR = ".content"
MEASURE_PLACEHOLDER = "测量用占位符"

BANNER_CSS = """
    .title-banner {
      position: relative;
      flex: none;
      margin: calc(-1 * var(--inset-top)) calc(-1 * var(--inset-x)) 30px;
      padding: 40px var(--inset-x);
      overflow: hidden;
    }
    .title-banner-bg {
      position: absolute;
      top: 0;
      left: 0;
      width: 100%;
      height: 100%;
      object-fit: cover;
      z-index: 1;
    }
    .title-banner-overlay {
      position: absolute;
      top: 0;
      left: 0;
      width: 100%;
      height: 100%;
      background: linear-gradient(to bottom, rgba(0,0,0,0.3) 0%, rgba(0,0,0,0.5) 100%);
      z-index: 2;
    }
    .title-banner h1 {
      position: relative;
      z-index: 3;
      color: #ffffff;
      text-shadow: 0 2px 10px rgba(0, 0, 0, 0.5);
      border: none;
      padding: 0;
      margin: 0;
    }"""


def first_page_chrome(options: RenderOptions) -> str:
    if options.has_cover_banner:
        return CHROME_BANNER
    if options.has_title_chrome:
        return CHROME_TITLE
    return CHROME_NONE


def escape_text(text: str) -> str:
    return html.escape(text, quote=True)


def paragraph_html(text: str, divider: bool = False) -> str:
    if divider:
        return '<hr class="divider" />'
    lines = [escape_text(line.strip()) for line in text.split("\n")]
    return f"<p>{'<br />'.join(lines)}</p>"


def content_html(paragraphs: Iterable[Tuple[str, bool]]) -> str:
    return "\n      ".join(paragraph_html(text, divider) for text, divider in paragraphs)


def blocks_html(blocks: Sequence[Block]) -> str:
    return content_html(group_blocks(blocks))


def _chrome_html(chrome: str, options: RenderOptions) -> Tuple[str, str]:
    """Returns (extra css, header markup) for the requested chrome."""
    if chrome == CHROME_NONE:
        return "", ""
    title = escape_text((options.title or "").strip())
    if chrome == CHROME_TITLE:
        return "", f'<h1 class="title">{title}</h1>'
    if chrome == CHROME_BANNER:
        source = f"data:{options.cover_mime_type};base64,{options.cover_image or ''}"
        header = (
            '<div class="title-banner">\n'
            f'      <img class="title-banner-bg" src="{source}" alt="cover" />\n'
            '      <div class="title-banner-overlay"></div>\n'
            f'      <h1 class="title">{title}</h1>\n'
            "    </div>"
        )
        return BANNER_CSS, header
    raise ValueError(f"Unknown page chrome '{chrome}'. Use one of {', '.join(CHROMES)}.")


def build_page_html(
    blocks: Sequence[Block],
    options: RenderOptions,
    page_number: int,
    total_pages: int,
    chrome: str = CHROME_NONE,
) -> str:
    css = load_theme_css(options.theme_preset.name)
    scale = options.font_scale
    extra_css, header = _chrome_html(chrome, options)
    return f"""<!DOCTYPE html>
<html lang="zh-CN">
<head>
  <meta charset="UTF-8">
  <style>
    {css}
    .title {{ font-size: {scale.title_px}px; }}
    .content {{ font-size: {scale.body_px}px; }}{extra_css}
  </style>
</head>
<body>
  <div class="page-container">
    {header}
    <div class="content">
      {blocks_html(blocks)}
    </div>
    <div class="page-number">
      <span>{page_number}</span> / {total_pages}
    </div>
  </div>
</body>
</html>"""


def build_placeholder_html(options: RenderOptions, chrome: str) -> str:
    placeholder = [Block(text=MEASURE_PLACEHOLDER, source=0)]
    return build_page_html(placeholder, options, 1, 1, chrome)
