from __future__ import annotations

from typing import Optional


class PagesnapError(Exception):
    """Base class for every error raised by the card engine."""


class RenderError(PagesnapError):
    """The layout engine could not be reached or failed to lay out a page."""


class RenderTimeoutError(RenderError):
    pass


class MeasurementError(RenderError):
    """A measurement did not produce a usable height."""


class CompositionError(PagesnapError):
    def __init__(self, page_number: int, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"Page {page_number}: {message}")
        self.page_number = page_number
        self.cause = cause


class CoverImageError(PagesnapError):
    pass
