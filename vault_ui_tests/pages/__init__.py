"""Page objects for the vault application."""
from vault_ui_tests.pages.base import BasePage, SectionCheck
from vault_ui_tests.pages.create_vault import CreateVaultPage
from vault_ui_tests.pages.positions import PositionsPage
from vault_ui_tests.pages.vault_detail import VaultDetailPage
from vault_ui_tests.pages.vault_list import VaultListPage

__all__ = [
    "BasePage",
    "CreateVaultPage",
    "PositionsPage",
    "SectionCheck",
    "VaultDetailPage",
    "VaultListPage",
]
