"""Screenshot capture with standardized file naming."""

from __future__ import annotations

import io
import logging
import re
import time
from pathlib import Path
from typing import Optional

from PIL import Image
from playwright.async_api import Page

from vault_ui_tests.config import settings

logger = logging.getLogger(__name__)

FALLBACK_SCREENSHOT_DIR = Path("/tmp/vault-ui-screenshots")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_name(name: str) -> str:
    """Make a screenshot name safe for any filesystem."""
    cleaned = _UNSAFE_CHARS.sub("-", name.strip()).strip("-")
    return cleaned or "screenshot"


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def init_screenshots_dir(directory: Optional[Path] = None) -> Path:
    """Create the screenshot directory, falling back to /tmp when not writable."""
    target = Path(directory or settings.screenshot_dir)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        logger.warning("Cannot write to %s, using %s", target, FALLBACK_SCREENSHOT_DIR)
        target = FALLBACK_SCREENSHOT_DIR
        target.mkdir(parents=True, exist_ok=True)
    return target


class ScreenshotHelper:
    """Capture full-page screenshots of one page into one directory."""

    def __init__(
        self,
        page: Page,
        directory: Optional[Path] = None,
        image_format: Optional[str] = None,
        quality: Optional[int] = None,
    ) -> None:
        self.page = page
        self.directory = init_screenshots_dir(directory)
        self.image_format = (image_format or settings.screenshot_format).lower()
        if self.image_format not in {"png", "webp"}:
            raise ValueError(f"Unsupported screenshot format: {self.image_format}")
        self.quality = settings.screenshot_quality if quality is None else quality

    def path_for(self, name: str) -> Path:
        return self.directory / f"{sanitize_name(name)}.{self.image_format}"

    async def take(self, name: str, full_page: bool = True) -> Path:
        """Save a screenshot named ``name`` and return its path."""
        path = self.path_for(name)
        if self.image_format == "webp":
            png_bytes = await self.page.screenshot(type="png", full_page=full_page)
            with Image.open(io.BytesIO(png_bytes)) as image:
                image.save(path, "WEBP", quality=self.quality)
        else:
            await self.page.screenshot(path=str(path), type="png", full_page=full_page)
        logger.info("Screenshot saved: %s", path.name)
        return path

    async def capture_state(self, test_name: str, state: str) -> Path:
        """Capture a mid-test state; names carry a timestamp so reruns never collide."""
        path = await self.take(f"{test_name}-{state}-{timestamp_ms()}")
        logger.info("Page state captured: %s", path.name)
        return path

    async def wallet_step(self, step: str) -> Path:
        path = await self.take(f"wallet-connection-{step}-{timestamp_ms()}")
        logger.info("Wallet connection screenshot saved: %s", path.name)
        return path
