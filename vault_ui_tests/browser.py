"""Thin wrapper around a Playwright page for fallback lookups and soft actions."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Union

import anyio
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page, TimeoutError as PlaywrightTimeout

from vault_ui_tests.config import settings
from vault_ui_tests.playwright_client import PlaywrightClient
from vault_ui_tests.screenshots import ScreenshotHelper

logger = logging.getLogger(__name__)

Selectors = Union[str, Iterable[str]]

NAVIGATION_TIMEOUT = 30000
RETRY_BACKOFF = 1.0
POLL_INTERVAL = 0.25


@dataclass
class ToolError(Exception):
    """Raised when a browser operation fails."""

    name: str
    payload: Dict[str, Any]
    message: str

    def __str__(self) -> str:  # pragma: no cover - human readable helper
        return f"{self.name} failed ({self.message}) with payload={self.payload}"


@dataclass
class SelectorMatch:
    """First element found by a fallback chain, and the selector that found it."""

    selector: str
    locator: Locator


def _as_list(selectors: Selectors) -> List[str]:
    if isinstance(selectors, str):
        return [selectors]
    return list(selectors)


class Browser:
    """Convenience wrapper over a Playwright page."""

    def __init__(self, page: Page, screenshots: Optional[ScreenshotHelper] = None) -> None:
        self._page = page
        self._screenshots = screenshots
        self.current_url: str | None = None
        self.current_title: str | None = None

    @property
    def page(self) -> Page:
        return self._page

    @property
    def screenshots(self) -> ScreenshotHelper:
        if self._screenshots is None:
            self._screenshots = ScreenshotHelper(self._page)
        return self._screenshots

    def is_available(self) -> bool:
        """False once the page (or its browser) has been closed."""
        try:
            return not self._page.is_closed()
        except PlaywrightError:
            logger.info("Page is closed, cannot continue test")
            return False

    async def _update_state(self) -> None:
        self.current_url = self._page.url
        self.current_title = await self._page.title()

    # ---- navigation -------------------------------------------------------------
    async def goto(
        self,
        url: str,
        wait_until: str = "networkidle",
        timeout: int = NAVIGATION_TIMEOUT,
    ) -> Dict[str, Any]:
        """Navigate to URL, retrying timeouts ``settings.retries`` times.

        A ``networkidle`` timeout is retried once with ``domcontentloaded``
        before it counts as a failed attempt; the app keeps websocket price
        feeds open, so the network may never go idle.
        """
        attempts = settings.retries + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = await self._page.goto(url, wait_until=wait_until, timeout=timeout)
            except PlaywrightTimeout as exc:
                last_error = exc
                if wait_until == "networkidle":
                    try:
                        response = await self._page.goto(url, wait_until="domcontentloaded", timeout=timeout)
                    except PlaywrightTimeout as fallback_exc:
                        last_error = fallback_exc
                    except PlaywrightError as fallback_exc:
                        raise ToolError(
                            name="goto",
                            payload={"url": url, "wait_until": "domcontentloaded"},
                            message=str(fallback_exc),
                        ) from fallback_exc
                    else:
                        return await self._navigation_result(response)
                logger.warning("Navigation to %s timed out (attempt %d/%d)", url, attempt, attempts)
                if attempt < attempts:
                    await anyio.sleep(RETRY_BACKOFF * attempt)
                continue
            except PlaywrightError as exc:
                raise ToolError(name="goto", payload={"url": url, "wait_until": wait_until}, message=str(exc)) from exc
            return await self._navigation_result(response)

        raise ToolError(
            name="goto",
            payload={"url": url, "wait_until": wait_until, "attempts": attempts},
            message=str(last_error),
        )

    async def _navigation_result(self, response: Any) -> Dict[str, Any]:
        await self._update_state()
        return {
            "url": self.current_url,
            "title": self.current_title,
            "status": response.status if response else None,
        }

    async def wait_for_load(self, state: str = "networkidle", timeout: int | None = None) -> None:
        try:
            await self._page.wait_for_load_state(state, timeout=timeout)
        except PlaywrightError as exc:
            raise ToolError(name="wait_for_load", payload={"state": state}, message=str(exc))

    async def pause(self, ms: int) -> None:
        """Fixed sleep through the page clock."""
        await self._page.wait_for_timeout(ms)

    # ---- lookups ----------------------------------------------------------------
    async def _locator_visible(self, locator: Locator, timeout: int = 0) -> bool:
        try:
            if timeout > 0:
                await locator.wait_for(state="visible", timeout=timeout)
                return True
            return await locator.is_visible()
        except PlaywrightError:
            return False

    async def find_first_visible(self, selectors: Selectors, timeout: int = 0) -> Optional[SelectorMatch]:
        """Return the first selector whose first match is visible.

        Args:
            selectors: Fallback chain, tried in order
            timeout: Milliseconds to wait on each selector (0 = check once)
        """
        for selector in _as_list(selectors):
            if not self.is_available():
                logger.info("Page closed during lookup, stopping at %s", selector)
                return None
            locator = self._page.locator(selector).first
            if await self._locator_visible(locator, timeout):
                logger.debug("Matched visible element with selector: %s", selector)
                return SelectorMatch(selector=selector, locator=locator)
        return None

    async def find_first_present(self, selectors: Selectors) -> Optional[SelectorMatch]:
        """Return the first selector that matches at least one element, visible or not."""
        for selector in _as_list(selectors):
            if not self.is_available():
                return None
            locator = self._page.locator(selector)
            try:
                count = await locator.count()
            except PlaywrightError:
                count = 0
            if count > 0:
                return SelectorMatch(selector=selector, locator=locator.first)
        return None

    async def is_visible(self, selector: str, timeout: int = 0) -> bool:
        if not self.is_available():
            return False
        return await self._locator_visible(self._page.locator(selector).first, timeout)

    async def wait_for_any(self, selectors: Selectors, timeout: int) -> Optional[str]:
        """Poll until any selector is visible; return it, or None on timeout."""
        chain = _as_list(selectors)
        deadline = anyio.current_time() + timeout / 1000.0
        while True:
            match = await self.find_first_visible(chain)
            if match:
                return match.selector
            if not self.is_available() or anyio.current_time() >= deadline:
                return None
            await anyio.sleep(POLL_INTERVAL)

    async def count(self, selector: str) -> int:
        try:
            return await self._page.locator(selector).count()
        except PlaywrightError:
            return 0

    # ---- actions ----------------------------------------------------------------
    async def click(self, selector: str, timeout: int | None = None) -> Dict[str, Any]:
        """Click the first element matching selector."""
        try:
            await self._page.locator(selector).first.click(timeout=timeout)
            await self._update_state()
            return {"selector": selector, "url": self.current_url}
        except PlaywrightError as exc:
            raise ToolError(name="click", payload={"selector": selector}, message=str(exc))

    async def soft_click(self, locator: Locator, label: str, timeout: int | None = None) -> bool:
        """Click, logging instead of raising when the element cannot be clicked."""
        if not self.is_available():
            return False
        try:
            await locator.click(timeout=timeout)
            return True
        except PlaywrightError as exc:
            logger.warning("Error clicking on %s: %s", label, exc)
            return False

    async def fill(self, selector: str, value: str) -> Dict[str, Any]:
        try:
            await self._page.locator(selector).first.fill(value)
            return {"selector": selector, "value": value}
        except PlaywrightError as exc:
            raise ToolError(name="fill", payload={"selector": selector, "value": value}, message=str(exc))

    async def text(self, selector: str, timeout: int = 5000) -> str:
        try:
            content = await self._page.locator(selector).first.text_content(timeout=timeout)
            return content or ""
        except PlaywrightError as exc:
            raise ToolError(name="text", payload={"selector": selector}, message=str(exc))

    async def title(self) -> str:
        return await self._page.title()

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        try:
            return await self._page.evaluate(script, arg)
        except PlaywrightError as exc:
            raise ToolError(name="evaluate", payload={"script": script}, message=str(exc))

    async def screenshot(self, name: str, full_page: bool = True) -> Optional[Path]:
        """Save a screenshot; skipped (None) when the page is already closed."""
        if not self.is_available():
            logger.info("Page is closed, skipping screenshot %s", name)
            return None
        return await self.screenshots.take(name, full_page=full_page)


@asynccontextmanager
async def browser_session(
    inject_wallet: bool = True,
    screenshot_dir: Optional[Path] = None,
    **client_kwargs: Any,
) -> AsyncIterator[Browser]:
    """Yield a Browser on a fresh client, with the wallet mock installed."""
    from vault_ui_tests.wallet import inject_mock_provider

    async with PlaywrightClient(**client_kwargs) as client:
        if inject_wallet:
            await inject_mock_provider(client.page)
        yield Browser(client.page, ScreenshotHelper(client.page, directory=screenshot_dir))
