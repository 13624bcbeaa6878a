"""Page object for the vault listing (/vaults)."""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator

from vault_ui_tests import constants
from vault_ui_tests.browser import ToolError
from vault_ui_tests.config import settings
from vault_ui_tests.pages.base import BasePage

logger = logging.getLogger(__name__)

_PERCENT = re.compile(r"(-?\d[\d,]*(?:\.\d+)?)\s*%")


def parse_percentage(text: str) -> Optional[float]:
    """Return the first percentage in ``text`` ("12.5%" -> 12.5), or None."""
    match = _PERCENT.search(text or "")
    if not match:
        return None
    return float(match.group(1).replace(",", ""))


def is_non_increasing(values: Sequence[float]) -> bool:
    return all(earlier >= later for earlier, later in zip(values, values[1:]))


class VaultListPage(BasePage):
    """Vault table: filters, APR sorting, search and the deposit modal."""

    async def goto(self) -> None:
        await self.browser.goto(settings.vaults_url)
        logger.info("Vaults page loaded successfully")

    async def wait_for_page_load(self) -> None:
        try:
            await self.browser.wait_for_load("networkidle", timeout=self.timeouts.page_load)
        except ToolError as exc:
            logger.info("Network did not go idle, continuing: %s", exc.message)
        await self.snap("vaults-page-initial")

    async def verify_basic_ui_elements(self) -> Dict[str, bool]:
        """Log (and return) visibility of header, Portfolio and Stats."""
        results = {
            "header": await self.browser.is_visible("header"),
            "portfolio": await self.browser.is_visible("text=Portfolio"),
            "stats": await self.browser.is_visible("text=Stats"),
        }
        logger.info("Header visible: %s", results["header"])
        logger.info("Portfolio section visible: %s", results["portfolio"])
        logger.info("Stats section visible: %s", results["stats"])
        return results

    async def verify_vault_table(self) -> bool:
        if await self.browser.find_first_visible(constants.VAULT_TABLE):
            logger.info("Vault table/list verified")
            return True
        header_visible = await self.browser.is_visible(constants.VAULT_TABLE_HEADER_FALLBACK)
        logger.info("Vault table header visible: %s", header_visible)
        return header_visible

    async def all_vault_filter_visible(self) -> bool:
        visible = await self.browser.is_visible(constants.ALL_VAULT_FILTER)
        logger.info("All Vault filter button visible: %s", visible)
        return visible

    async def wait_for_vaults(self, timeout: int = 15000) -> bool:
        """Wait for one of the known vault names to render."""
        try:
            await self.page.wait_for_selector(f"text={constants.KNOWN_VAULT_NAMES}", timeout=timeout)
        except PlaywrightError as exc:
            logger.info("No vaults found or vaults are still loading: %s", exc)
            return False
        logger.info("Found at least one vault")
        return True

    async def sort_by_apr(self) -> bool:
        """Click the APR header twice so the list ends up in descending order.

        The first click may sort ascending depending on the app's default.
        """
        logger.info("Attempting to sort vaults by APR in descending order...")
        header = await self.browser.find_first_visible(constants.APR_HEADER)
        if header:
            for _ in range(2):
                await header.locator.click()
                await self.browser.pause(self.timeouts.animation)
            logger.info("Clicked on APR header to sort in descending order")
        else:
            logger.info("APR header not found with standard selectors, continuing test")

        await self.snap("vaults-sorted-by-apr")
        return header is not None

    async def find_vaults(self) -> List[Locator]:
        for selector in constants.VAULT_ROWS:
            if not self.is_available():
                break
            elements = await self.page.locator(selector).all()
            if elements:
                logger.info("Found %d vaults with selector: %s", len(elements), selector)
                return elements
        logger.info("No vaults found on the page")
        return []

    async def find_first_vault(self) -> Optional[Locator]:
        """First vault row; after sort_by_apr() this is the highest APR."""
        vaults = await self.find_vaults()
        return vaults[0] if vaults else None

    async def read_apr_values(self) -> List[float]:
        values: List[float] = []
        for row in await self.find_vaults():
            try:
                text = await row.text_content() or ""
            except PlaywrightError:
                continue
            value = parse_percentage(text)
            if value is not None:
                values.append(value)
        return values

    async def is_sorted_by_apr_desc(self) -> Optional[bool]:
        """None when fewer than two APR values are on screen."""
        values = await self.read_apr_values()
        logger.info("APR values in display order: %s", values)
        if len(values) < 2:
            return None
        return is_non_increasing(values)

    async def test_search(self, search_term: str) -> bool:
        match = await self.browser.find_first_visible(constants.SEARCH_INPUT[:1])
        if not match:
            logger.info("No search input found on page")
            return False
        logger.info("Search input found, testing search with term: %s", search_term)
        await match.locator.fill(search_term)
        await self.browser.pause(self.timeouts.animation)
        await self.snap("vaults-search-results")
        return True

    async def close_modal(self) -> bool:
        close = await self.browser.find_first_visible(constants.MODAL_CLOSE)
        if close and await self.browser.soft_click(close.locator, "modal close button"):
            logger.info("Modal closed")
            return True
        return False

    async def click_first_deposit_button(self) -> bool:
        """Open the deposit modal from the first row. Returns modal visibility."""
        deposit = await self.browser.find_first_visible('button:has-text("Deposit")')
        if not deposit:
            logger.info("No deposit button visible")
            return False
        await deposit.locator.click()
        logger.info("Clicked on deposit button")

        modal = await self.browser.find_first_visible(
            ", ".join(constants.MODAL), timeout=self.timeouts.element_appear
        )
        logger.info("Deposit modal visible: %s", modal is not None)
        await self.snap("vaults-deposit-modal")
        await self.close_modal()
        return modal is not None
