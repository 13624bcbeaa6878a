"""Mock Web3 wallet provider and wallet connection flows.

The application talks to an injected EIP-1193 provider at ``window.ethereum``.
Tests install a stub that answers the account and chain queries with a fixed
test wallet, then drive the app's own "Connect Wallet" UI.
"""
from __future__ import annotations

import json
import logging
from typing import List, Optional, Union

import anyio
from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError

from vault_ui_tests import constants
from vault_ui_tests.browser import Browser, ToolError
from vault_ui_tests.config import settings

logger = logging.getLogger(__name__)

WEB3_CDN_URL = "https://cdn.jsdelivr.net/npm/web3@{version}/dist/web3.min.js"

CONNECT_BUTTON_TIMEOUT = 3000
DIALOG_TIMEOUT = 3000
WALLET_OPTION_TIMEOUT = 2000
CONNECTED_TIMEOUT = 10.0
CONNECTED_POLL_INTERVAL = 0.5
ADDRESS_PROBE_TIMEOUT = 1000
WHITELIST_WAIT = 120.0


class WalletConnectionError(RuntimeError):
    """Raised when the connect-wallet flow fails unexpectedly."""


def shorten_address(address: str) -> str:
    """0x1822946a...89ff -> 0x1822...89ff"""
    return f"{address[:6]}...{address[-4:]}"


def build_mock_provider_script(address: str, chain_id: int = 1) -> str:
    """JavaScript that installs the stub provider before any page script runs."""
    return f"""
(() => {{
  const address = {json.dumps(address)};
  const chainId = {json.dumps(hex(chain_id))};
  const networkVersion = {json.dumps(str(chain_id))};
  window.__walletMockCalls = [];
  const mockProvider = {{
    isMetaMask: true,
    selectedAddress: address,
    networkVersion: networkVersion,
    chainId: chainId,
    request: async ({{ method }}) => {{
      window.__walletMockCalls.push(method);
      if (method === 'eth_requestAccounts' || method === 'eth_accounts') {{
        return [address];
      }}
      if (method === 'eth_chainId') {{
        return chainId;
      }}
      if (method === 'net_version') {{
        return networkVersion;
      }}
      return null;
    }},
    on: () => {{}},
    removeListener: () => {{}},
  }};
  Object.defineProperty(window, 'ethereum', {{
    value: mockProvider,
    writable: true,
    configurable: true,
  }});
}})();
"""


def build_web3_loader_script(version: str) -> str:
    """JavaScript that appends the web3 bundle from the CDN once the DOM exists."""
    src = WEB3_CDN_URL.format(version=version)
    return f"""
(() => {{
  const load = () => {{
    const script = document.createElement('script');
    script.src = {json.dumps(src)};
    script.async = true;
    document.head.appendChild(script);
  }};
  if (document.head) {{
    load();
  }} else {{
    document.addEventListener('DOMContentLoaded', load);
  }}
}})();
"""


async def inject_mock_provider(
    target: Union[Page, BrowserContext],
    address: Optional[str] = None,
    chain_id: Optional[int] = None,
    load_web3: Optional[bool] = None,
) -> None:
    """Register the provider stub (and optionally web3) as init scripts."""
    address = address or settings.wallet_address
    chain_id = settings.chain_id if chain_id is None else chain_id
    load_web3 = settings.load_web3 if load_web3 is None else load_web3

    await target.add_init_script(script=build_mock_provider_script(address, chain_id))
    if load_web3:
        await target.add_init_script(script=build_web3_loader_script(settings.web3_version))
    logger.info("Mock ethereum provider injected for %s", shorten_address(address))


def address_selectors(address: str) -> List[str]:
    return [
        f"text={shorten_address(address)}",
        f"text={address}",
        f'[title*="{address}"]',
        *constants.WALLET_ADDRESS_GENERIC,
    ]


async def handle_wallet_dialog(browser: Browser) -> Optional[str]:
    """Pick the injected wallet in the connector modal, if one opens.

    Returns the wallet option selector that was clicked, or None.
    """
    try:
        modal = await browser.find_first_visible(constants.WALLET_DIALOG, timeout=DIALOG_TIMEOUT)
        if not modal:
            logger.info("No wallet dialog appeared")
            return None
        logger.info("Found wallet connection modal with selector: %s", modal.selector)

        option = await browser.find_first_visible(constants.WALLET_OPTIONS, timeout=WALLET_OPTION_TIMEOUT)
        if not option:
            logger.info("Wallet dialog has no MetaMask/injected option")
            return None
        logger.info("Found wallet option: %s", option.selector)
        if await browser.soft_click(option.locator, "wallet option"):
            logger.info("Selected wallet option")
            return option.selector
    except ToolError as exc:
        logger.warning("No wallet dialog found or error handling it: %s", exc)
    return None


async def wait_for_wallet_connected(
    browser: Browser,
    address: Optional[str] = None,
    timeout: float = CONNECTED_TIMEOUT,
) -> bool:
    """Poll for any wallet address indicator; False after ``timeout`` seconds."""
    address = address or settings.wallet_address
    selectors = address_selectors(address)
    logger.info("Waiting for wallet connection to complete...")

    deadline = anyio.current_time() + timeout
    while anyio.current_time() < deadline and browser.is_available():
        match = await browser.find_first_visible(selectors)
        if match:
            logger.info("Found wallet address indicator: %s", match.selector)
            return True
        await anyio.sleep(CONNECTED_POLL_INTERVAL)

    logger.warning("Timed out waiting for wallet address to appear, continuing anyway")
    return False


async def verify_wallet_connected(browser: Browser, address: Optional[str] = None) -> bool:
    """Single pass over the address indicators."""
    address = address or settings.wallet_address
    logger.info("Verifying wallet connection...")
    match = await browser.find_first_visible(address_selectors(address), timeout=ADDRESS_PROBE_TIMEOUT)
    if match:
        logger.info("Wallet connection verified with selector: %s", match.selector)
        return True
    logger.info("Could not verify wallet connection, continuing anyway")
    return False


async def connect_wallet(browser: Browser, address: Optional[str] = None) -> bool:
    """Click through the app's connect flow.

    Returns True once an address indicator is visible. When no connect button
    exists the wallet is assumed to be connected already and only verified.

    Raises:
        WalletConnectionError: If an action fails outright
    """
    address = address or settings.wallet_address
    logger.info("Looking for connect wallet button...")
    try:
        button = await browser.find_first_visible(constants.CONNECT_WALLET_BUTTON, timeout=CONNECT_BUTTON_TIMEOUT)
        if not button:
            logger.info("No connect wallet button found, assuming already connected")
            return await verify_wallet_connected(browser, address)

        logger.info("Found connect button with selector: %s", button.selector)
        await button.locator.click()
        logger.info("Clicked connect wallet button")

        await handle_wallet_dialog(browser)
        connected = await wait_for_wallet_connected(browser, address)
        logger.info("Wallet connection completed (address visible: %s)", connected)
        return connected
    except (ToolError, PlaywrightError) as exc:
        raise WalletConnectionError(f"Failed to connect wallet: {exc}") from exc


async def setup_wallet_connection(
    browser: Browser,
    address: Optional[str] = None,
    url: Optional[str] = None,
) -> bool:
    """Inject the provider stub, optionally load ``url``, then run the connect flow.

    The stub is an init script, so it only reaches documents loaded after
    this call. Pass ``url`` (or navigate afterwards) on a fresh page.
    """
    logger.info("Setting up wallet connection via UI interaction...")
    await inject_mock_provider(browser.page, address=address)
    if url:
        await browser.goto(url)
    return await connect_wallet(browser, address)


_WHITELIST_PROBE = """
() => {
  const errorElements = document.querySelectorAll('.error-message, .whitelist-error, .connection-required');
  const needles = ['whitelist', 'connect wallet', 'access denied', 'not authorized'];
  const texts = Array.from(document.querySelectorAll('div, p, span, h1, h2, h3, h4, h5, h6'))
    .map(el => (el.textContent || '').toLowerCase())
    .filter(text => needles.some(needle => text.includes(needle)));
  return errorElements.length > 0 || texts.length > 0;
}
"""


async def requires_whitelist(browser: Browser) -> bool:
    """True when the page shows whitelist / connect / access-denied gating."""
    return bool(await browser.evaluate(_WHITELIST_PROBE))


async def _wait_for_gate_lifted(browser: Browser, timeout_ms: int) -> bool:
    """True once the connect button detaches or vault content shows up."""
    page = browser.page
    deadline = anyio.current_time() + timeout_ms / 1000.0
    while anyio.current_time() < deadline and browser.is_available():
        if await browser.count(", ".join(constants.WHITELIST_GATE)) == 0:
            return True
        if await browser.find_first_visible(constants.VAULT_CONTENT):
            return True
        await page.wait_for_timeout(1000)
    return False


async def verify_wallet_whitelist(
    browser: Browser,
    url: Optional[str] = None,
    wait: float = WHITELIST_WAIT,
) -> bool:
    """Visit the vaults page and wait for manual wallet approval if it is gated.

    Returns:
        True when the page is usable, False when access was never granted
    """
    await browser.goto(url or settings.vaults_url)

    if not await requires_whitelist(browser):
        logger.info("No whitelist verification required, continuing with test")
        return True

    await browser.screenshot("whitelist-verification-required")
    logger.warning("Whitelist verification required. Manual wallet connection needed.")
    logger.warning(
        "MANUAL ACTION REQUIRED: connect a whitelisted wallet with MetaMask or Rabby; "
        "the test continues automatically once connected (waiting up to %.0fs)",
        wait,
    )

    if await _wait_for_gate_lifted(browser, int(wait * 1000)):
        logger.info("Wallet connected successfully")
        await browser.screenshot("wallet-connected")
        return True

    logger.error("Failed to connect wallet within the timeout period")
    return False
