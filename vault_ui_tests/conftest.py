import os

import pytest
import pytest_asyncio

from vault_ui_tests.browser import Browser
from vault_ui_tests.config import UiTargetProfile, settings
from vault_ui_tests.playwright_client import PlaywrightClient
from vault_ui_tests.screenshots import sanitize_name
from vault_ui_tests.wallet import inject_mock_provider


def pytest_collection_modifyitems(config, items):
    """Skip e2e scenarios unless requested with ``-m e2e`` or VAULT_UI_E2E=1.

    They need a browser install and a reachable application.
    """
    markexpr = config.getoption("-m", default="") or ""
    if "e2e" in markexpr or os.environ.get("VAULT_UI_E2E", "0") == "1":
        return

    skip_e2e = pytest.mark.skip(reason="e2e scenarios need a running app. Run with: pytest -m e2e")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report as item.rep_<phase> for fixture teardown."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest_asyncio.fixture()
async def playwright_client():
    """Create a Playwright client instance."""
    async with PlaywrightClient(headless=settings.headless) as client:
        yield client


@pytest_asyncio.fixture()
async def browser(request, playwright_client):
    """Browser on a page with the mock wallet installed.

    Saves a ``failure-<test>`` screenshot when the test body fails.
    """
    await inject_mock_provider(playwright_client.page)
    browser = Browser(playwright_client.page)
    yield browser

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        await browser.screenshot(f"failure-{sanitize_name(request.node.name)}")


def _profile_id(profile: UiTargetProfile) -> str:
    return profile.name


@pytest.fixture(params=settings.profiles(), ids=_profile_id)
def active_profile(request):
    """Activate each configured UI target profile for the test run."""
    profile: UiTargetProfile = request.param
    with settings.use_profile(profile):
        yield profile
