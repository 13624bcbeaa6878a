"""Page object for the Create Vault form."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator

from vault_ui_tests import constants
from vault_ui_tests.browser import ToolError
from vault_ui_tests.pages.base import BasePage, SectionCheck

logger = logging.getLogger(__name__)

SELECTORS = constants.CREATE_VAULT
DROPDOWN_SETTLE = 2000


class CreateVaultPage(BasePage):
    """Name, principal token, publish toggle, range config and liquidity pools."""

    async def open_form(self) -> None:
        """Open the form from the vaults page.

        Raises:
            ToolError: If neither a Create Vault button nor menu item exists
        """
        count = await self.browser.count(SELECTORS["OPEN_BUTTON"])
        logger.info("Found %d Create Vault elements on the page", count)
        await self.snap("before-finding-create-vault-button")

        button = self.page.get_by_role("button", name="Create Vault")
        if await button.count() > 0:
            logger.info("Create Vault button found, clicking it")
            await button.first.click()
        else:
            logger.info("Button not found, checking for alternative elements")
            link = self.page.get_by_role("menuitem", name="Create Vault")
            if await link.count() == 0:
                raise ToolError(
                    name="open_create_vault",
                    payload={"url": self.page.url},
                    message="No Create Vault button or link found on the page",
                )
            logger.info("Found Create Vault link instead of button")
            await link.first.click()

        logger.info("Waiting for the create vault form to appear")
        try:
            await self.page.wait_for_selector(SELECTORS["FORM_READY"], timeout=self.timeouts.element_appear)
        except PlaywrightError as exc:
            raise ToolError(name="open_create_vault", payload={}, message=str(exc))
        await self.snap("create-vault-form")

    async def set_name(self, name: str) -> None:
        match = await self.browser.find_first_visible(
            SELECTORS["VAULT_NAME_INPUT"], timeout=self.timeouts.element_appear
        )
        if not match:
            raise ToolError(name="set_name", payload={"name": name}, message="Vault name input not found")
        await match.locator.fill(name)
        logger.info("Vault name set to %s", name)

    async def current_principal_token(self) -> str:
        """Symbol shown on the principal token button ("WETH" or "USDC")."""
        selector = SELECTORS["PRINCIPAL_TOKEN"]
        try:
            await self.page.wait_for_selector(selector, timeout=self.timeouts.element_appear)
        except PlaywrightError as exc:
            raise ToolError(name="principal_token", payload={"selector": selector}, message=str(exc))
        text = await self.browser.text(selector)
        logger.info("Current token selected: %s", text.strip())
        return "WETH" if "WETH" in text else "USDC"

    async def _open_token_dropdown(self, current: str) -> None:
        button = self.page.locator(f'button:has-text("{current}")').first
        await button.click()
        await self.browser.pause(DROPDOWN_SETTLE)
        await self.snap("token-dropdown-open")

    async def select_principal_token(self, symbol: str) -> bool:
        """Open the dropdown and click the first option chain entry present."""
        current = await self.current_principal_token()
        await self._open_token_dropdown(current)

        options: List[str] = SELECTORS["TOKEN_OPTIONS"][symbol]
        option = await self.browser.find_first_present(options)
        if not option:
            logger.warning("%s option not found in token dropdown", symbol)
            return False
        logger.info("%s option found with selector: %s", symbol, option.selector)
        await option.locator.click()

        selected = await self.browser.is_visible(
            f'button:has-text("{symbol}")', timeout=self.timeouts.element_appear
        )
        logger.info("%s selected: %s", symbol, selected)
        return selected

    async def switch_principal_token(self) -> str:
        """WETH -> USDC -> WETH, or USDC -> WETH. Returns the final symbol."""
        current = await self.current_principal_token()
        await self.snap("token-selector-visible")
        if current == "WETH":
            logger.info("WETH is selected, switching to USDC")
            await self.select_principal_token("USDC")
            await self.animation_pause()
            logger.info("Switching back to WETH for the rest of the form")
            await self.select_principal_token("WETH")
        else:
            logger.info("USDC is selected, switching to WETH")
            await self.select_principal_token("WETH")
        return await self.current_principal_token()

    async def toggle_publish(self) -> bool:
        """Flip the publish toggle and flip it back. False when it is missing."""
        toggle = await self.browser.find_first_present(SELECTORS["PUBLISH_TOGGLE"])
        if not toggle:
            logger.info("Publish toggle not found, skipping this section")
            await self.snap("publish-toggle-not-found")
            return False

        logger.info("Found publish toggle with selector: %s", toggle.selector)
        await toggle.locator.wait_for(state="visible", timeout=self.timeouts.element_appear)
        await self.snap("publish-toggle-found")
        await toggle.locator.click()
        await self.snap("publish-vault-toggled")
        await toggle.locator.click()
        return True

    async def check_range_config(self) -> SectionCheck:
        """Narrow shows the preset percentages, Wide shows the range hint."""
        ranges: Dict[str, str] = SELECTORS["RANGE_CONFIG"]
        if await self.browser.count(ranges["NARROW"]) == 0:
            logger.info("Range Config options not found, skipping this section")
            return SectionCheck(name="Range Config", found=False)

        await self.page.locator(ranges["NARROW"]).first.click()
        await self.snap("narrow-range-selected")
        narrow = [await self.browser.is_visible(sel) for sel in SELECTORS["NARROW_RANGE_VALUES"]]

        await self.page.locator(ranges["WIDE"]).first.click()
        await self.snap("wide-range-selected")
        wide = await self.browser.is_visible(SELECTORS["WIDE_RANGE_HINT"])

        logger.info("Range config narrow values visible: %s, wide hint visible: %s", narrow, wide)
        return SectionCheck(
            name="Range Config",
            found=True,
            selector=ranges["NARROW"],
            details={"narrow": all(narrow), "wide": wide},
        )

    async def check_liquidity_pools(self) -> SectionCheck:
        """Click each pool option and record whether its hint text appears."""
        pools: Dict[str, str] = SELECTORS["LIQUIDITY_POOLS"]
        hints: Dict[str, str] = SELECTORS["LIQUIDITY_POOL_HINTS"]
        if await self.browser.count(pools["LOW_VALUE"]) == 0:
            logger.info("Liquidity Pools options not found, skipping this section")
            return SectionCheck(name="Liquidity Pools", found=False)

        results: Dict[str, bool] = {}
        for key, selector in pools.items():
            clicked = await self.browser.soft_click(self.page.locator(selector).first, key)
            await self.snap(f"{key.lower().replace('_', '-')}-option")
            results[key] = clicked and await self.browser.is_visible(hints[key])
            logger.info("Liquidity pool %s hint visible: %s", key, results[key])

        return SectionCheck(name="Liquidity Pools", found=True, selector=pools["LOW_VALUE"], details=results)

    async def has_safety_evaluation(self) -> bool:
        found = await self.browser.count(SELECTORS["SAFETY_EVALUATION"]) > 0
        if not found:
            logger.info("Safety Evaluation section not found, skipping this check")
        return found

    async def submit_button(self) -> Optional[Locator]:
        match = await self.browser.find_first_present(SELECTORS["SUBMIT_BUTTON"])
        if match:
            logger.info("Submit button found with selector: %s", match.selector)
            return match.locator
        return None
