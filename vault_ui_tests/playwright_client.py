"""
Direct Playwright Client
========================

Owns the Playwright driver, the browser process, one default context and one
default page. Context options (viewport, HTTPS handling, video, tracing) come
from ``vault_ui_tests.config.settings`` unless passed explicitly.

Usage:
    from vault_ui_tests.playwright_client import PlaywrightClient

    async with PlaywrightClient() as client:
        await client.page.goto("http://localhost:3000/vaults")
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from vault_ui_tests.config import settings

logger = logging.getLogger(__name__)

BROWSER_TYPES = ("chromium", "firefox", "webkit")


class PlaywrightClient:
    """
    In-process Playwright client.

    Example:
        async with PlaywrightClient(headless=False) as client:
            page = await client.new_page()
            await page.goto("https://example.com")
    """

    def __init__(
        self,
        browser_type: Optional[str] = None,
        headless: Optional[bool] = None,
        timeout: Optional[int] = None,
        viewport: Optional[Dict[str, int]] = None,
        record_video: Optional[bool] = None,
        trace: Optional[bool] = None,
    ):
        """
        Args:
            browser_type: chromium, firefox or webkit (default from settings)
            headless: Run without a window (default from settings)
            timeout: Default action timeout in milliseconds
            viewport: {"width": .., "height": ..} for the default context
            record_video: Record a video of the default context
            trace: Record a Playwright trace, saved on close
        """
        self.browser_type = browser_type or settings.browser_type
        if self.browser_type not in BROWSER_TYPES:
            raise ValueError(f"Unsupported browser type: {self.browser_type}")
        self.headless = settings.headless if headless is None else headless
        self.timeout = settings.timeouts.page_load if timeout is None else timeout
        self.viewport = viewport or settings.viewport_size
        self.record_video = settings.record_video if record_video is None else record_video
        self.trace = settings.trace if trace is None else trace
        self.trace_path: Optional[Path] = None

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "PlaywrightClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def context_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``browser.new_context`` of the default context."""
        options: Dict[str, Any] = {
            "viewport": self.viewport,
            "ignore_https_errors": settings.ignore_https_errors,
        }
        if self.record_video:
            video_dir = settings.artifacts_dir / "videos"
            video_dir.mkdir(parents=True, exist_ok=True)
            options["record_video_dir"] = str(video_dir)
            options["record_video_size"] = self.viewport
        return options

    async def connect(self) -> None:
        """Launch the browser and open the default context and page."""
        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.browser_type)
        self._browser = await launcher.launch(headless=self.headless, slow_mo=settings.slow_mo)
        logger.debug(
            "Launched %s (headless=%s, viewport=%s)", self.browser_type, self.headless, self.viewport
        )

        self._context = await self._browser.new_context(**self.context_options())
        self._context.set_default_timeout(self.timeout)
        if self.trace:
            await self._context.tracing.start(screenshots=True, snapshots=True, sources=False)

        self._page = await self._context.new_page()

    async def new_page(self) -> Page:
        """Create a new page in the default context."""
        if not self._context:
            raise RuntimeError("Client not connected. Use 'async with' or call connect()")
        return await self._context.new_page()

    async def new_context(self, **kwargs: Any) -> BrowserContext:
        """Create an extra browser context (caller closes it)."""
        if not self._browser:
            raise RuntimeError("Client not connected. Use 'async with' or call connect()")
        options = {"viewport": self.viewport, "ignore_https_errors": settings.ignore_https_errors}
        options.update(kwargs)
        context = await self._browser.new_context(**options)
        context.set_default_timeout(self.timeout)
        return context

    async def close(self) -> None:
        """Save the trace and release every resource. Safe to call twice."""
        if self._context and self.trace:
            trace_dir = settings.artifacts_dir / "traces"
            trace_dir.mkdir(parents=True, exist_ok=True)
            self.trace_path = trace_dir / f"trace-{int(time.time() * 1000)}.zip"
            await self._context.tracing.stop(path=str(self.trace_path))
            logger.info("Trace saved: %s", self.trace_path)

        if self._page:
            if not self._page.is_closed():
                await self._page.close()
            self._page = None

        if self._context:
            await self._context.close()
            self._context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @property
    def browser(self) -> Browser:
        if not self._browser:
            raise RuntimeError("Client not connected")
        return self._browser

    @property
    def context(self) -> BrowserContext:
        if not self._context:
            raise RuntimeError("Client not connected")
        return self._context

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Client not connected or page not created")
        return self._page
