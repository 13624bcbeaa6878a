"""Page object for an account's positions (/account/<address>/positions)."""
from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError

from vault_ui_tests import constants
from vault_ui_tests.config import settings
from vault_ui_tests.pages.base import BasePage

logger = logging.getLogger(__name__)

MODAL_TIMEOUT = 5000


class PositionsPage(BasePage):
    async def goto(self, address: Optional[str] = None) -> None:
        await self.browser.goto(settings.positions_url(address))
        logger.info("Positions page loaded successfully")

    async def title(self) -> str:
        title = await self.browser.title()
        logger.info("Page title: %s", title)
        return title

    async def verify_table(self) -> bool:
        match = await self.browser.find_first_visible(constants.POSITIONS_TABLE)
        logger.info("Positions table/list %s", "verified" if match else "not found")
        return match is not None

    async def count_positions(self, timeout: int = 15000) -> int:
        """Number of position rows once any has rendered; 0 on timeout."""
        try:
            await self.page.wait_for_selector(constants.POSITION_ROWS, timeout=timeout)
        except PlaywrightError:
            logger.info("No positions found or positions are still loading")
            return 0
        positions = await self.browser.count(constants.POSITION_ROWS)
        logger.info("Found %d positions", positions)
        return positions

    async def open_first_position_action(self) -> bool:
        """Click the first row's action and expect a modal or detail panel."""
        action = await self.browser.find_first_visible(constants.POSITION_ACTION)
        if not action:
            logger.info("No action button found to click")
            return False

        logger.info("Found action button, clicking it")
        if not await self.browser.soft_click(action.locator, "position action"):
            return False

        panel = await self.browser.find_first_visible(
            ", ".join(constants.POSITION_PANEL), timeout=MODAL_TIMEOUT
        )
        if not panel:
            logger.warning("Action clicked but no modal/detail panel opened")
            return False
        logger.info("Modal/detail panel opened successfully")
        await self.snap("positions-modal-open")

        close = await self.browser.find_first_visible(constants.POSITION_PANEL_CLOSE)
        if close and await self.browser.soft_click(close.locator, "position modal close button"):
            logger.info("Modal closed")
        return True

    async def test_search(self, search_term: str) -> bool:
        match = await self.browser.find_first_visible(constants.SEARCH_INPUT[1:])
        if not match:
            logger.info("No search input found on page")
            return False
        logger.info("Search input found, testing search functionality")
        await match.locator.fill(search_term)
        await self.browser.pause(self.timeouts.animation)
        await self.snap("positions-search-results")
        return True
