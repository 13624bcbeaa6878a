"""Shared configuration for the vault UI test suite.

Every tunable comes from an environment variable, then the repository's
``.env.defaults`` file, then the coded default. Select the application
instance with ``VAULT_UI_TARGET``:

- ``local`` (default): a dev server on http://localhost:3000
- ``staging``: the shared preview deployment

``VAULT_UI_BASE_URL`` overrides the base URL of whichever target is active.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Literal, Optional, Tuple
from urllib.parse import urljoin

from vault_ui_tests.constants import PATHS, Timeouts
from vault_ui_tests.env_defaults import REPO_ROOT, env_bool, env_int, env_str

logger = logging.getLogger(__name__)

Target = Literal["local", "staging"]

DEFAULT_WALLET_ADDRESS = "0x1822946a4f1a625044d93a468db6db756d4f89ff"

TARGET_BASE_URLS: Dict[str, str] = {
    "local": "http://localhost:3000",
    "staging": "https://dev-krystal-web-pr-3207.krystal.team",
}


@dataclass
class UiTargetProfile:
    """Host + wallet identity used for one run against the application."""

    name: str
    base_url: str
    wallet_address: str = DEFAULT_WALLET_ADDRESS
    chain_id: int = 1
    allow_writes: bool = False


def get_target() -> Target:
    """Return the active target from VAULT_UI_TARGET.

    Raises:
        ValueError: If the variable names an unknown target
    """
    target = env_str("VAULT_UI_TARGET", "local").lower()
    if target not in TARGET_BASE_URLS:
        raise ValueError(
            f"Invalid VAULT_UI_TARGET: {target!r}. "
            f"Must be one of: {', '.join(sorted(TARGET_BASE_URLS))}"
        )
    return target  # type: ignore[return-value]


def parse_viewport(raw: str) -> Tuple[int, int]:
    """Parse ``WIDTHxHEIGHT`` into a tuple."""
    try:
        width, height = raw.lower().split("x", 1)
        return int(width), int(height)
    except ValueError as exc:
        raise ValueError(f"Viewport must look like 1280x720, got {raw!r}") from exc


class UiTestConfig:
    """Configuration for browser, timing, artifacts and the wallet mock."""

    def __init__(self) -> None:
        self._target = get_target()

        self.browser_type: str = env_str("PLAYWRIGHT_BROWSER", "chromium")
        self.headless: bool = env_bool("PLAYWRIGHT_HEADLESS", True)
        self.slow_mo: int = env_int("PLAYWRIGHT_SLOW_MO", 0)
        self.viewport: Tuple[int, int] = parse_viewport(env_str("VAULT_UI_VIEWPORT", "1280x720"))
        self.ignore_https_errors: bool = env_bool("VAULT_UI_IGNORE_HTTPS_ERRORS", True)

        self.test_timeout: int = env_int("VAULT_UI_TEST_TIMEOUT", 60000)
        self.comparison_timeout: int = env_int("VAULT_UI_COMPARISON_TIMEOUT", 120000)
        self.retries: int = max(0, env_int("VAULT_UI_RETRIES", 2))
        self.timeouts = Timeouts(
            page_load=env_int("VAULT_UI_TIMEOUT_PAGE_LOAD", Timeouts.page_load),
            element_appear=env_int("VAULT_UI_TIMEOUT_ELEMENT_APPEAR", Timeouts.element_appear),
            animation=env_int("VAULT_UI_TIMEOUT_ANIMATION", Timeouts.animation),
            render=env_int("VAULT_UI_TIMEOUT_RENDER", Timeouts.render),
        )

        self.screenshot_dir = Path(env_str("SCREENSHOT_DIR", str(REPO_ROOT / "screenshots")))
        self.screenshot_format: str = env_str("SCREENSHOT_FORMAT", "png").lower()
        if self.screenshot_format not in {"png", "webp"}:
            raise ValueError(f"SCREENSHOT_FORMAT must be png or webp, got {self.screenshot_format!r}")
        self.screenshot_quality: int = env_int("SCREENSHOT_QUALITY", 85)

        self.artifacts_dir = Path(env_str("VAULT_UI_ARTIFACTS_DIR", str(REPO_ROOT / "test-results")))
        self.record_video: bool = env_bool("VAULT_UI_RECORD_VIDEO", False)
        self.trace: bool = env_bool("VAULT_UI_TRACE", False)

        self.load_web3: bool = env_bool("VAULT_UI_LOAD_WEB3", True)
        self.web3_version: str = env_str("VAULT_UI_WEB3_VERSION", "4.16.0")

        wallet_address = env_str("VAULT_UI_WALLET_ADDRESS", DEFAULT_WALLET_ADDRESS)
        chain_id = env_int("VAULT_UI_CHAIN_ID", 1)
        override = env_str("VAULT_UI_BASE_URL", "")

        self._profiles: Dict[str, UiTargetProfile] = {}
        for name, base_url in TARGET_BASE_URLS.items():
            if name == self._target and override:
                base_url = override
            self._profiles[name] = UiTargetProfile(
                name=name,
                base_url=base_url,
                wallet_address=wallet_address,
                chain_id=chain_id,
                allow_writes=name == "local",
            )
        self._active: UiTargetProfile = self._profiles[self._target]

    # ---- active profile helpers -------------------------------------------------
    @property
    def target(self) -> Target:
        return self._target

    @property
    def base_url(self) -> str:
        return self._active.base_url

    @property
    def wallet_address(self) -> str:
        return self._active.wallet_address

    @property
    def chain_id(self) -> int:
        return self._active.chain_id

    @property
    def allow_writes(self) -> bool:
        return self._active.allow_writes

    @property
    def viewport_size(self) -> Dict[str, int]:
        width, height = self.viewport
        return {"width": width, "height": height}

    # ---- profile orchestration --------------------------------------------------
    def profiles(self) -> List[UiTargetProfile]:
        return list(self._profiles.values())

    def profile(self, name: str) -> UiTargetProfile:
        return self._profiles[name]

    @contextmanager
    def use_profile(self, profile: UiTargetProfile) -> Iterator[UiTargetProfile]:
        """Temporarily switch the active profile.

        The profile is copied so mutations made by a test do not leak into
        the next one.
        """
        previous = self._active
        self._active = deepcopy(profile)
        try:
            yield self._active
        finally:
            self._active = previous

    # ---- utility helpers --------------------------------------------------------
    def url(self, path: str) -> str:
        """Return an absolute URL for the provided path."""
        return urljoin(self.base_url.rstrip("/") + "/", path.lstrip("/"))

    @property
    def vaults_url(self) -> str:
        return self.url(PATHS.vaults)

    def positions_url(self, address: Optional[str] = None) -> str:
        return self.url(PATHS.positions.format(address=address or self.wallet_address))

    def describe(self) -> str:
        width, height = self.viewport
        return (
            f"target={self._active.name} base_url={self.base_url} "
            f"browser={self.browser_type} headless={self.headless} "
            f"viewport={width}x{height} retries={self.retries}"
        )


# Singleton instance - initialized on first import
settings = UiTestConfig()
logger.debug("[CONFIG] %s", settings.describe())
