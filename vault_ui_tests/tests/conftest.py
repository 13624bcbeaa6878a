"""Fixtures for the offline unit tests: fake pages, fast timeouts, temp screenshots."""
import pytest

from vault_ui_tests import browser as browser_module
from vault_ui_tests.browser import Browser
from vault_ui_tests.config import settings
from vault_ui_tests.constants import Timeouts
from vault_ui_tests.screenshots import ScreenshotHelper
from vault_ui_tests.tests.fakes import FakePage


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch, tmp_path):
    """No real waiting and no writes outside tmp_path."""
    monkeypatch.setattr(settings, "timeouts", Timeouts(page_load=50, element_appear=50, animation=0, render=0))
    monkeypatch.setattr(settings, "screenshot_dir", tmp_path / "screenshots")
    monkeypatch.setattr(settings, "screenshot_format", "png")
    monkeypatch.setattr(settings, "artifacts_dir", tmp_path / "artifacts")
    monkeypatch.setattr(settings, "retries", 1)
    monkeypatch.setattr(browser_module, "RETRY_BACKOFF", 0.0)
    monkeypatch.setattr(browser_module, "POLL_INTERVAL", 0.01)
    return settings


@pytest.fixture
def page():
    return FakePage(url="http://localhost:3000/vaults", title="Vaults | Krystal")


@pytest.fixture
def browser(page, tmp_path):
    """Browser over a FakePage (shadows the real-browser fixture)."""
    return Browser(page, ScreenshotHelper(page, directory=tmp_path / "screenshots"))
