"""
Journey 05: Create Vault Form

Opens the Create Vault form from the vaults page and exercises every option
without submitting: name, principal token switch, publish toggle, range
config, allowed liquidity pools, safety evaluation and the submit button.
"""
import anyio
import pytest
from playwright.async_api import expect

from vault_ui_tests.config import settings
from vault_ui_tests.constants import Timeouts
from vault_ui_tests.wallet import connect_wallet, verify_wallet_connected

pytestmark = [pytest.mark.asyncio, pytest.mark.e2e]


class TestCreateVaultForm:
    async def test_form_options(self, browser, vault_list, create_vault):
        with anyio.fail_after(Timeouts.seconds(settings.test_timeout)):
            await vault_list.goto()
            await vault_list.wait_for_page_load()
            await connect_wallet(browser)
            await verify_wallet_connected(browser)
            await browser.screenshot("wallet-connected-state")

            await vault_list.verify_basic_ui_elements()
            await vault_list.verify_vault_table()

            await create_vault.open_form()
            await create_vault.set_name("Test Vault Name")

            token = await create_vault.switch_principal_token()
            assert token in {"WETH", "USDC"}

            await create_vault.toggle_publish()

            ranges = await create_vault.check_range_config()
            if ranges:
                assert ranges.details["narrow"], "Narrow range presets not shown"
                assert ranges.details["wide"], "Wide range hint not shown"

            pools = await create_vault.check_liquidity_pools()
            if pools:
                missing = [key for key, visible in pools.details.items() if not visible]
                assert not missing, f"Liquidity pool hints missing for: {missing}"

            await create_vault.has_safety_evaluation()

            submit = await create_vault.submit_button()
            if submit is not None:
                await expect(submit).to_be_enabled()

            await browser.screenshot("create-vault-form-completed")
