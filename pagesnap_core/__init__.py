"""Measured pagination and card rendering for pagesnap."""

from .options import RenderOptions  # noqa: F401
from .paginator import Page, paginate, paginate_sync  # noqa: F401
from .compositor import compose_pages  # noqa: F401
from .pipeline import render_file, render_text  # noqa: F401

__all__ = [
    "Page",
    "RenderOptions",
    "compose_pages",
    "paginate",
    "paginate_sync",
    "render_file",
    "render_text",
]
