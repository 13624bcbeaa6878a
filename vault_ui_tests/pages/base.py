"""Shared base for page objects."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from playwright.async_api import Page

from vault_ui_tests.browser import Browser
from vault_ui_tests.config import settings
from vault_ui_tests.constants import Timeouts

logger = logging.getLogger(__name__)


@dataclass
class SectionCheck:
    """Outcome of a soft verification of one page section."""

    name: str
    found: bool
    selector: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.found


class BasePage:
    """Holds the browser wrapper and the closed-page guard every page needs."""

    def __init__(self, browser: Browser) -> None:
        self.browser = browser

    @property
    def page(self) -> Page:
        return self.browser.page

    @property
    def timeouts(self) -> Timeouts:
        return settings.timeouts

    def is_available(self) -> bool:
        return self.browser.is_available()

    def skipped(self, name: str, action: str) -> SectionCheck:
        logger.info("Page is closed, skipping %s", action)
        return SectionCheck(name=name, found=False, details={"skipped": True})

    async def snap(self, name: str) -> Optional[Path]:
        """Screenshot only while the page is still open."""
        return await self.browser.screenshot(name)

    async def animation_pause(self) -> None:
        if self.is_available():
            await self.browser.pause(self.timeouts.animation)
