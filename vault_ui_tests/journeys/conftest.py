"""
Fixtures for the e2e scenarios.

- Skips the session when the application does not answer
- Runs the wallet preflight once per session
"""
import logging

import anyio
import pytest

from vault_ui_tests.config import settings
from vault_ui_tests.global_setup import probe_base_url, run_global_setup
from vault_ui_tests.pages import CreateVaultPage, PositionsPage, VaultDetailPage, VaultListPage

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def app_reachable():
    """Skip every scenario when nothing answers at the base URL."""
    if not anyio.run(probe_base_url):
        pytest.skip(f"Vault app not reachable at {settings.base_url}")
    return settings.base_url


@pytest.fixture(scope="session", autouse=True)
def global_wallet_setup(app_reachable):
    """Connect the wallet once before the first scenario."""
    logger.info("Running e2e session against %s", settings.describe())
    return anyio.run(run_global_setup)


@pytest.fixture
def vault_list(browser):
    return VaultListPage(browser)


@pytest.fixture
def vault_detail(browser):
    return VaultDetailPage(browser)


@pytest.fixture
def positions_page(browser):
    return PositionsPage(browser)


@pytest.fixture
def create_vault(browser):
    return CreateVaultPage(browser)
