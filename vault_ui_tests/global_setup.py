"""One-shot preflight run before the journey session.

Checks that the application answers at all, then connects the mock wallet
once so the first scenario does not pay for the wallet handshake. Failures are
logged and never raised; every scenario connects the wallet again anyway.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from vault_ui_tests.browser import Browser
from vault_ui_tests.config import settings
from vault_ui_tests.playwright_client import PlaywrightClient
from vault_ui_tests.wallet import setup_wallet_connection

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 10.0


async def probe_base_url(base_url: Optional[str] = None, timeout: float = PROBE_TIMEOUT) -> bool:
    """True when the application answers HTTP at all (any status code)."""
    base_url = base_url or settings.base_url
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True, verify=False) as client:
            response = await client.get(base_url)
    except httpx.HTTPError as exc:
        logger.warning("Application at %s is unreachable: %s", base_url, exc)
        return False
    logger.info("Application at %s answered with HTTP %d", base_url, response.status_code)
    return True


async def run_global_setup() -> bool:
    """Connect the wallet once against the vaults page. Returns success, never raises."""
    logger.info("Starting global setup - initializing wallet connection")
    if not await probe_base_url():
        logger.warning("Skipping wallet preflight, application not reachable")
        return False

    client: Optional[PlaywrightClient] = None
    connected = False
    try:
        client = PlaywrightClient()
        await client.connect()
        browser = Browser(client.page)
        connected = await setup_wallet_connection(browser, url=settings.vaults_url)
        logger.info("Global wallet connection setup completed (address visible: %s)", connected)
    except Exception as exc:  # noqa: BLE001 - a failed preflight must not end the session
        logger.critical("Failed to setup wallet connection during global setup: %s", exc)
    finally:
        if client is not None:
            await client.close()

    logger.info("Global setup completed")
    return connected
