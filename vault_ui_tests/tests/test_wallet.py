"""Mock provider scripts and the connect-wallet / whitelist flows."""
import pytest
from playwright.async_api import Error as PlaywrightError

from vault_ui_tests import constants, wallet
from vault_ui_tests.config import DEFAULT_WALLET_ADDRESS, settings
from vault_ui_tests.tests.fakes import FakeElement
from vault_ui_tests.wallet import (
    WalletConnectionError,
    build_mock_provider_script,
    build_web3_loader_script,
    connect_wallet,
    handle_wallet_dialog,
    inject_mock_provider,
    requires_whitelist,
    setup_wallet_connection,
    shorten_address,
    verify_wallet_whitelist,
    wait_for_wallet_connected,
)

SHORT_ADDRESS = f"text={shorten_address(settings.wallet_address)}"
GATE = ", ".join(constants.WHITELIST_GATE)


@pytest.fixture(autouse=True)
def fast_polling(monkeypatch):
    monkeypatch.setattr(wallet, "CONNECTED_POLL_INTERVAL", 0.01)


def test_shorten_address():
    assert shorten_address(DEFAULT_WALLET_ADDRESS) == "0x1822...89ff"


def test_mock_provider_script_answers_account_and_chain_queries():
    script = build_mock_provider_script("0xabc", chain_id=137)

    assert '"0xabc"' in script
    assert '"0x89"' in script
    assert "isMetaMask: true" in script
    assert "eth_requestAccounts" in script
    assert "eth_chainId" in script
    assert "Object.defineProperty(window, 'ethereum'" in script
    assert "window.__walletMockCalls" in script


def test_web3_loader_points_at_versioned_bundle():
    script = build_web3_loader_script("4.16.0")
    assert "https://cdn.jsdelivr.net/npm/web3@4.16.0/dist/web3.min.js" in script


@pytest.mark.asyncio
async def test_inject_mock_provider(page):
    await inject_mock_provider(page, address="0xabc", chain_id=1, load_web3=False)
    assert len(page.init_scripts) == 1
    assert '"0xabc"' in page.init_scripts[0]

    await inject_mock_provider(page, address="0xabc", chain_id=1, load_web3=True)
    assert len(page.init_scripts) == 3
    assert "web3.min.js" in page.init_scripts[-1]


@pytest.mark.asyncio
async def test_connect_wallet_without_button_only_verifies(browser, page):
    page.add(SHORT_ADDRESS)

    assert await connect_wallet(browser) is True
    assert page.clicks == []


@pytest.mark.asyncio
async def test_connect_wallet_clicks_through_dialog(browser, page):
    def show_dialog(fake_page):
        fake_page.add('div[role="dialog"]')
        fake_page.add('button:has-text("MetaMask")', FakeElement(on_click=lambda p: p.add(SHORT_ADDRESS)))

    page.add('button:has-text("Connect Wallet")', FakeElement(on_click=show_dialog))

    assert await connect_wallet(browser) is True
    assert page.clicks == ['button:has-text("Connect Wallet")', 'button:has-text("MetaMask")']


@pytest.mark.asyncio
async def test_connect_wallet_wraps_playwright_errors(browser, page):
    def broken(fake_page):
        raise PlaywrightError("Target page, context or browser has been closed")

    page.add('button:has-text("Connect Wallet")', FakeElement(on_click=broken))

    with pytest.raises(WalletConnectionError, match="Failed to connect wallet"):
        await connect_wallet(browser)


@pytest.mark.asyncio
async def test_wait_for_wallet_connected_times_out(browser):
    assert await wait_for_wallet_connected(browser, timeout=0.05) is False


@pytest.mark.asyncio
async def test_whitelist_not_required(browser, page):
    page.evaluate_result = False

    assert await verify_wallet_whitelist(browser) is True
    assert page.goto_calls[0]["url"].endswith("/vaults")
    assert page.screenshots == []


@pytest.mark.asyncio
async def test_whitelist_gate_lifted(browser, page):
    page.evaluate_result = True
    page.add(".vault-content")
    page.add(GATE)

    assert await verify_wallet_whitelist(browser, wait=1) is True
    names = [shot["path"].rsplit("/", 1)[-1] for shot in page.screenshots]
    assert names == ["whitelist-verification-required.png", "wallet-connected.png"]


@pytest.mark.asyncio
async def test_whitelist_gate_never_lifted(browser, page):
    page.evaluate_result = True
    page.add(GATE)

    assert await verify_wallet_whitelist(browser, wait=0.05) is False


@pytest.mark.asyncio
async def test_setup_wallet_connection_injects_before_navigating(browser, page):
    scripts_at_navigation = []
    navigate = page.goto

    async def recording_goto(url, **kwargs):
        scripts_at_navigation.append(len(page.init_scripts))
        return await navigate(url, **kwargs)

    page.goto = recording_goto
    page.add(SHORT_ADDRESS)

    assert await setup_wallet_connection(browser, url=settings.vaults_url) is True
    assert scripts_at_navigation == [len(page.init_scripts)]
    assert scripts_at_navigation[0] >= 1
    assert page.goto_calls[0]["url"] == settings.vaults_url


@pytest.mark.asyncio
async def test_setup_wallet_connection_without_url_stays_put(browser, page):
    page.add(SHORT_ADDRESS)

    assert await setup_wallet_connection(browser) is True
    assert page.goto_calls == []
    assert page.init_scripts


@pytest.mark.asyncio
async def test_wallet_dialog_without_known_option(browser, page):
    page.add('div[role="dialog"]')
    page.add('button:has-text("WalletConnect")')

    assert await handle_wallet_dialog(browser) is None
    assert page.clicks == []


@pytest.mark.asyncio
async def test_wallet_dialog_absent(browser, page):
    assert await handle_wallet_dialog(browser) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("script_result, expected", [(True, True), (False, False), (None, False)])
async def test_requires_whitelist(browser, page, script_result, expected):
    page.evaluate_result = script_result
    assert await requires_whitelist(browser) is expected
