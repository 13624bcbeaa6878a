import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from vault_ui_tests import constants
from vault_ui_tests.pages import VaultDetailPage
from vault_ui_tests.pages import vault_detail as vault_detail_module
from vault_ui_tests.tests.fakes import FakeElement

pytestmark = pytest.mark.asyncio


@pytest.fixture
def detail(browser):
    return VaultDetailPage(browser)


def screenshot_names(page):
    return [shot["path"].rsplit("/", 1)[-1] for shot in page.screenshots]


async def test_wait_for_detail_page_load_finds_landmark(detail, page):
    page.load_state_error = PlaywrightTimeout("network busy")
    page.add('text="Strategy Settings"')

    assert await detail.wait_for_detail_page_load() is True
    assert screenshot_names(page) == ["vault-detail.png"]


async def test_wait_for_detail_page_load_falls_back_to_pause(detail, page):
    assert await detail.wait_for_detail_page_load() is False
    assert vault_detail_module.LOAD_FALLBACK_WAIT in page.waits
    assert screenshot_names(page) == ["vault-detail.png"]


async def test_every_check_skips_on_closed_page(detail, page):
    page.closed = True

    checks = [
        await detail.verify_performance_chart(),
        await detail.verify_assets_section(),
        await detail.verify_strategy_settings(),
        await detail.verify_deposit_withdraw(),
        await detail.verify_risk_warning(),
    ]

    assert not any(checks)
    assert all(check.details == {"skipped": True} for check in checks)
    assert [check.name for check in checks] == [
        "Historical Performance",
        "Assets",
        "Strategy Settings",
        "Deposit/Withdraw",
        "Understand the Risk",
    ]
    assert await detail.wait_for_detail_page_load() is False


async def test_performance_chart_clicks_each_period(detail, page):
    page.add('text="Historical Performance"')
    page.add(constants.time_period_selector("24h"))
    page.add(constants.time_period_selector("30D"))
    page.add("svg.recharts-surface")

    check = await detail.verify_performance_chart()

    assert check.found
    assert check.selector == 'text="Historical Performance"'
    assert check.details == {
        "periods": {"24h": True, "7D": False, "30D": True},
        "chart": "svg.recharts-surface",
    }
    assert screenshot_names(page) == ["performance-chart-24h.png", "performance-chart-30D.png"]


async def test_performance_chart_missing(detail):
    check = await detail.verify_performance_chart()
    assert not check
    assert check.details == {}


async def test_assets_section(detail, page):
    page.add('h2:has-text("Assets")')
    page.add(constants.ASSET_ITEMS, FakeElement(), FakeElement())
    page.add("text=TVL")

    check = await detail.verify_assets_section()

    assert check.found
    assert check.details == {"asset_count": 2, "tvl": True}


async def test_strategy_settings_reads_risk_level(detail, page):
    page.add('text="Strategy Settings"')
    page.add('text="Medium Risk"', FakeElement(text="  Medium Risk "))
    page.add("text=[WIDE]")

    check = await detail.verify_strategy_settings()

    assert check.details == {"risk_level": "Medium Risk", "range_settings": True}


async def test_deposit_withdraw_skips_click_on_active_tab(detail, page):
    page.add(constants.DEPOSIT_BUTTON, FakeElement(active=True))
    page.add(constants.AMOUNT_INPUT)
    page.add(constants.MAX_BUTTON)
    page.add(constants.WITHDRAW_BUTTON)

    check = await detail.verify_deposit_withdraw()

    assert check.found
    assert page.clicks == [constants.WITHDRAW_BUTTON]
    assert check.details == {
        "deposit": True,
        "deposit_input": True,
        "max": True,
        "slippage": False,
        "withdraw": True,
        "withdraw_input": True,
    }


async def test_deposit_withdraw_absent(detail, page):
    check = await detail.verify_deposit_withdraw()
    assert check.found is False
    assert check.details["deposit"] is False
    assert check.details["withdraw"] is False


async def test_risk_warning(detail, page):
    page.add('div:has-text("Understand the Risk")')
    page.add("text=DYOR")

    check = await detail.verify_risk_warning()

    assert check.found
    assert check.details == {"content": True}
