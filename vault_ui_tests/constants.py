"""Paths, timeouts and selector catalogs shared by page objects and scenarios.

Selector lists are ordered fallback chains: callers try each entry in turn and
use the first one that matches a visible element. The web application renders
the same widget with different markup depending on build and viewport, so a
single selector is rarely enough.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class Paths:
    vaults: str = "/vaults"
    positions: str = "/account/{address}/positions"


PATHS = Paths()


@dataclass(frozen=True)
class Timeouts:
    """Wait budgets in milliseconds."""

    page_load: int = 15000
    element_appear: int = 10000
    animation: int = 1000
    render: int = 2000

    @staticmethod
    def seconds(ms: int) -> float:
        return ms / 1000.0


# Vault names seeded in the development environment
KNOWN_VAULT_NAMES = r"/Long Test|steve|NKN Vault|Bull/"

TIME_PERIODS: List[str] = ["24h", "7D", "30D"]

# ---- wallet -----------------------------------------------------------------

CONNECT_WALLET_BUTTON: List[str] = [
    'button:has-text("Connect Wallet")',
    'button:has-text("Connect")',
    '[role="button"]:has-text("Connect Wallet")',
    '[data-testid="connect-wallet-button"]',
    ".connect-wallet-button",
    'a:has-text("Connect Wallet")',
    'button:has-text("Login")',
    'button:has-text("Sign In")',
]

WALLET_DIALOG: List[str] = [
    'div[role="dialog"]',
    ".wallet-connector-modal",
    ".wallet-dialog",
    ".connector-list",
]

WALLET_OPTIONS: List[str] = [
    'button:has-text("MetaMask")',
    'button:has-text("Injected")',
    '[data-wallet="injected"]',
    '[data-wallet="metamask"]',
]

WALLET_ADDRESS_GENERIC: List[str] = [
    ".wallet-address",
    '[data-testid="wallet-address"]',
]

WHITELIST_GATE: List[str] = [
    ".connect-wallet-button",
    'button:has-text("Connect Wallet")',
]

VAULT_CONTENT: List[str] = [
    ".vault-content",
    ".portfolio-section",
    ".vault-item",
]

# ---- vault list -------------------------------------------------------------

VAULT_TABLE: List[str] = [
    "table",
    '[role="table"]',
    ".vault-list",
]

VAULT_TABLE_HEADER_FALLBACK = (
    'text=Vault >> xpath=ancestor::div[contains(.,"Assets")]'
    '[contains(.,"Type")][contains(.,"TVL")]'
)

APR_HEADER: List[str] = [
    'th:has-text("APR")',
    '[role="columnheader"]:has-text("APR")',
    'div.column-header:has-text("APR")',
    'button:has-text("APR")',
    "text=APR",
]

VAULT_ROWS: List[str] = [
    'tr:has-text("%")',
    '[role="row"]:has-text("%")',
    'div.vault-item:has-text("%")',
    'div:has-text("APR") + div:has-text("%")',
    "text=Long Test",
]

SEARCH_INPUT: List[str] = [
    'input[placeholder*="Search"]',
    'input[type="search"]',
    'input[placeholder*="search" i]',
]

ALL_VAULT_FILTER = 'button:has-text("All Vault")'

MODAL: List[str] = [
    ".modal",
    '[role="dialog"]',
    "dialog",
]

MODAL_CLOSE: List[str] = [
    '.modal button[aria-label="Close"]',
    '[role="dialog"] button[aria-label="Close"]',
    'dialog button[aria-label="Close"]',
]

# ---- vault detail -----------------------------------------------------------

DETAIL_LANDMARKS: List[str] = [
    'text="Historical Performance"',
    'text="Assets"',
    'text="Strategy Settings"',
    'text="Deposit"',
]

PERFORMANCE: List[str] = [
    'text="Historical Performance"',
    'h2:has-text("Historical Performance")',
    "text=Performance",
    'div:has-text("Historical Performance")',
]

ASSETS: List[str] = [
    'text="Assets"',
    'h2:has-text("Assets")',
    'div:has-text("Assets"):not(:has-text("Historical"))',
]

ASSET_ITEMS = 'img[alt*="WETH"], img[alt*="ETH"], img[alt*="token"]'

STRATEGY: List[str] = [
    'text="Strategy Settings"',
    'h2:has-text("Strategy")',
    'div:has-text("Strategy Settings")',
]

RISK_LEVEL: List[str] = [
    'text="High Risk"',
    'text="Medium Risk"',
    'text="Low Risk"',
]

RANGE_SETTINGS: List[str] = [
    "text=Range Setting",
    "text=[NARROW]",
    "text=[WIDE]",
]

RISK_WARNING: List[str] = [
    'text="Understand the Risk"',
    'h2:has-text("Understand the Risk")',
    'div:has-text("Understand the Risk")',
]

RISK_WARNING_CONTENT: List[str] = [
    "text=DYOR",
    "text=managed by the Vault Owner",
]

CHART: List[str] = [
    ".recharts-responsive-container",
    "svg.recharts-surface",
    '[class*="chart"]',
    "svg g path",
]

DEPOSIT_BUTTON = 'button:has-text("Deposit"), button:has-text("+ Deposit")'
WITHDRAW_BUTTON = 'button:has-text("Withdraw")'
AMOUNT_INPUT = 'input[type="number"], input[placeholder*="Amount"]'
MAX_BUTTON = 'button:has-text("MAX")'
SLIPPAGE: List[str] = [
    'text="slippage"',
    'text="Slippage"',
]


def time_period_selector(period: str) -> str:
    return (
        f'button:has-text("{period}"), '
        f'div:has-text("{period}"):not(:has-text("Historical"))'
    )


# ---- positions --------------------------------------------------------------

POSITIONS_TABLE: List[str] = [
    "table",
    '[role="table"]',
    ".positions-list",
    ".positions-table",
]

POSITION_ROWS = ".position-item, tr:not(:first-child)"
POSITION_ACTION = ".position-item button, tr:not(:first-child) button"
POSITION_PANEL: List[str] = [
    ".modal",
    '[role="dialog"]',
    ".detail-panel",
]
POSITION_PANEL_CLOSE = ".modal button, [role=\"dialog\"] button, .detail-panel button"

# ---- create vault -----------------------------------------------------------

CREATE_VAULT: Dict[str, object] = {
    "OPEN_BUTTON": 'button:has-text("Create Vault"), a:has-text("Create Vault")',
    "FORM_READY": 'text="Set Name"',
    "VAULT_NAME_INPUT": [
        'input[placeholder*="Name"]',
        'input[name="name"]',
        'input[placeholder*="name"]',
    ],
    "PRINCIPAL_TOKEN": 'button:has-text("WETH"), button:has-text("USDC")',
    "TOKEN_OPTIONS": {
        "USDC": [
            '[role="option"]:has-text("USDC")',
            'li:has-text("USDC")',
            'div[role="menuitem"]:has-text("USDC")',
            'text="USDC"',
        ],
        "WETH": [
            '[role="option"]:has-text("WETH")',
            'li:has-text("WETH")',
            'div[role="menuitem"]:has-text("WETH")',
            'text="WETH"',
        ],
    },
    "PUBLISH_TOGGLE": [
        '[role="switch"]',
        'button[role="switch"]',
        'input[type="checkbox"][name*="publish" i]',
        'label:has-text("Publish") input[type="checkbox"]',
    ],
    "RANGE_CONFIG": {
        "NARROW": 'button:has-text("Narrow")',
        "WIDE": 'button:has-text("Wide")',
    },
    "NARROW_RANGE_VALUES": ["text=10.52%", "text=0.02%"],
    "WIDE_RANGE_HINT": 'text="Range width is calculated based on the lower and upper prices"',
    "LIQUIDITY_POOLS": {
        "LOW_VALUE": 'button:has-text("Low Value")',
        "MODERATE_VALUE": 'button:has-text("Moderate Value")',
        "HIGH_VALUE": 'button:has-text("High Value")',
        "FIXED": 'button:has-text("Fixed")',
    },
    "LIQUIDITY_POOL_HINTS": {
        "LOW_VALUE": 'text="≤5 USDC"',
        "MODERATE_VALUE": 'text="≤50 USDC"',
        "HIGH_VALUE": 'text="≤500 USDC"',
        "FIXED": 'text="A specific list of pools"',
    },
    "SAFETY_EVALUATION": 'text="Safety Evaluation:"',
    "SUBMIT_BUTTON": [
        'button[type="submit"]:has-text("Create Vault")',
        'form button:has-text("Create Vault")',
        'button:has-text("Create")',
    ],
}
