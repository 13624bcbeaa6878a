import pytest

from vault_ui_tests import constants
from vault_ui_tests.config import settings
from vault_ui_tests.pages import PositionsPage
from vault_ui_tests.tests.fakes import FakeElement

pytestmark = pytest.mark.asyncio


@pytest.fixture
def positions(browser):
    return PositionsPage(browser)


async def test_goto_defaults_to_configured_wallet(positions, page):
    await positions.goto()
    assert page.goto_calls[0]["url"] == settings.positions_url()

    await positions.goto("0xabc")
    assert page.goto_calls[-1]["url"].endswith("/account/0xabc/positions")


async def test_title_and_table(positions, page):
    page.page_title = "Positions | Krystal"
    assert await positions.title() == "Positions | Krystal"

    assert await positions.verify_table() is False
    page.add(".positions-table")
    assert await positions.verify_table() is True


async def test_count_positions(positions, page):
    assert await positions.count_positions(timeout=10) == 0

    page.add(constants.POSITION_ROWS, FakeElement(), FakeElement(), FakeElement())
    assert await positions.count_positions(timeout=10) == 3


async def test_open_first_position_action(positions, page):
    panel = ", ".join(constants.POSITION_PANEL)

    def open_panel(fake_page):
        fake_page.add(panel)
        fake_page.add(constants.POSITION_PANEL_CLOSE)

    page.add(constants.POSITION_ACTION, FakeElement(on_click=open_panel))

    assert await positions.open_first_position_action() is True
    assert page.clicks == [constants.POSITION_ACTION, constants.POSITION_PANEL_CLOSE]
    assert page.screenshots[-1]["path"].endswith("positions-modal-open.png")


async def test_open_first_position_action_without_panel(positions, page):
    assert await positions.open_first_position_action() is False

    page.add(constants.POSITION_ACTION)
    assert await positions.open_first_position_action() is False


async def test_search(positions, page):
    page.add('input[type="search"]')

    assert await positions.test_search("ETH") is True
    assert page.fills == {'input[type="search"]': "ETH"}
