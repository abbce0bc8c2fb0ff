"""
Layout renderer backed by headless Chromium.

The rest of the engine only sees :class:`LayoutRenderer`: ``measure`` returns
the rendered height of an element and ``rasterize`` returns PNG bytes. Only
this module talks to Playwright.

One Chromium process is shared per event loop through :class:`BrowserPool`.
It is launched on first use and closed by :meth:`BrowserPool.shutdown`. Each
operation checks out its own tab and closes it afterwards, so probes never
see each other's DOM or styles.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

from playwright.async_api import Browser, Error as PlaywrightError, Page, Playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .errors import MeasurementError, RenderError, RenderTimeoutError
from .markup import CONTENT_SELECTOR
from .options import DEFAULT_TIMEOUT_MS
from .presets import Dimensions


CHROMIUM_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
)

# Box height of the element, or the extent of its children when intrinsic.
MEASURE_SCRIPT = """
([selector, intrinsic]) => {
  const el = document.querySelector(selector);
  if (!el) {
    return null;
  }
  const box = el.getBoundingClientRect();
  if (!intrinsic) {
    return box.height;
  }
  let bottom = box.top;
  for (const child of el.children) {
    bottom = Math.max(bottom, child.getBoundingClientRect().bottom);
  }
  const padding = parseFloat(getComputedStyle(el).paddingBottom) || 0;
  return bottom - box.top + padding;
}
"""

FONTS_READY_SCRIPT = "() => document.fonts.ready.then(() => true)"


class LayoutRenderer(ABC):
    @abstractmethod
    async def measure(
        self,
        html: str,
        dimensions: Dimensions,
        selector: str = CONTENT_SELECTOR,
        *,
        intrinsic: bool = False,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> float:
        """Lay out ``html`` in a viewport of ``dimensions`` and return the
        height of ``selector`` in CSS pixels.

        With ``intrinsic`` the height of the element's content is returned
        instead of its box, so a flex-grown container reports how much of it
        is actually used. Raises :class:`MeasurementError` when the element
        is missing.
        """

    @abstractmethod
    async def rasterize(
        self,
        html: str,
        dimensions: Dimensions,
        *,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> bytes:
        """Render ``html`` and return a PNG screenshot of exactly
        ``dimensions``."""

    async def close(self) -> None:
        return None


class BrowserPool:
    def __init__(
        self,
        launch_args: Sequence[str] = CHROMIUM_ARGS,
        debug: bool = False,
    ) -> None:
        self._launch_args = list(launch_args)
        self._debug = debug
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def acquire(self) -> Browser:
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if self.running:
                return self._browser
            try:
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                if self._debug:
                    print("[DEBUG] Launching headless Chromium")
                self._browser = await self._playwright.chromium.launch(
                    headless=True,
                    args=self._launch_args,
                )
            except PlaywrightError as exc:
                raise RenderError(f"Unable to launch Chromium: {exc}") from exc
            return self._browser

    @asynccontextmanager
    async def tab(self, dimensions: Dimensions) -> AsyncIterator[Page]:
        browser = await self.acquire()
        try:
            page = await browser.new_page(viewport=dimensions.as_viewport())
        except PlaywrightError as exc:
            raise RenderError(f"Unable to open a browser tab: {exc}") from exc
        try:
            yield page
        finally:
            if not page.is_closed():
                await page.close()

    async def shutdown(self) -> None:
        browser, playwright = self._browser, self._playwright
        self._browser = None
        self._playwright = None
        if browser is not None and browser.is_connected():
            await browser.close()
        if playwright is not None:
            await playwright.stop()
        if self._debug and browser is not None:
            print("[DEBUG] Chromium closed")


_shared_pool: Optional[BrowserPool] = None


def shared_pool(debug: bool = False) -> BrowserPool:
    global _shared_pool
    if _shared_pool is None:
        _shared_pool = BrowserPool(debug=debug)
    return _shared_pool


async def shutdown_shared_pool() -> None:
    global _shared_pool
    pool, _shared_pool = _shared_pool, None
    if pool is not None:
        await pool.shutdown()


class PlaywrightRenderer(LayoutRenderer):
    def __init__(self, pool: Optional[BrowserPool] = None, debug: bool = False) -> None:
        self.pool = pool or shared_pool(debug=debug)
        self.debug = debug

    async def _load(self, page: Page, html: str, timeout_ms: float) -> None:
        page.set_default_timeout(timeout_ms)
        await page.set_content(html, wait_until="load")
        await page.evaluate(FONTS_READY_SCRIPT)

    async def _bounded(self, operation, timeout_ms: float, what: str):
        try:
            return await asyncio.wait_for(operation, timeout=timeout_ms / 1000.0)
        except (asyncio.TimeoutError, PlaywrightTimeoutError) as exc:
            raise RenderTimeoutError(f"{what} exceeded {timeout_ms:.0f} ms") from exc
        except PlaywrightError as exc:
            raise RenderError(f"{what} failed: {exc}") from exc

    async def measure(
        self,
        html: str,
        dimensions: Dimensions,
        selector: str = CONTENT_SELECTOR,
        *,
        intrinsic: bool = False,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> float:
        async def run() -> Optional[float]:
            async with self.pool.tab(dimensions) as page:
                await self._load(page, html, timeout_ms)
                return await page.evaluate(MEASURE_SCRIPT, [selector, intrinsic])

        height = await self._bounded(run(), timeout_ms, "Measurement")
        if height is None:
            raise MeasurementError(f"Element '{selector}' not found in measured page")
        return float(height)

    async def rasterize(
        self,
        html: str,
        dimensions: Dimensions,
        *,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> bytes:
        async def run() -> bytes:
            async with self.pool.tab(dimensions) as page:
                await self._load(page, html, timeout_ms)
                return await page.screenshot(type="png", full_page=False)

        return await self._bounded(run(), timeout_ms, "Rasterization")

    async def close(self) -> None:
        await self.pool.shutdown()
