"""Reusable multi-step flows for vault list and detail coverage."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

import anyio

from vault_ui_tests.pages.base import SectionCheck
from vault_ui_tests.pages.vault_detail import VaultDetailPage
from vault_ui_tests.pages.vault_list import VaultListPage

logger = logging.getLogger(__name__)

T = TypeVar("T")

PERFORMANCE_TIMEOUT = 30.0
SECTION_TIMEOUT = 15.0


async def run_guarded(
    label: str,
    func: Callable[..., Awaitable[T]],
    *args: Any,
    timeout: float = SECTION_TIMEOUT,
) -> Optional[T]:
    """Run one step with a hard time limit.

    A step that overruns ``timeout`` seconds is cancelled and a step that
    raises is logged; both return None so the caller can move on.
    """
    result: Optional[T] = None
    try:
        with anyio.move_on_after(timeout) as scope:
            result = await func(*args)
    except Exception as exc:  # noqa: BLE001 - a failed step must not end the run
        logger.warning("Error during %s, continuing: %s", label, exc)
        return None
    if scope.cancelled_caught:
        logger.warning("Timeout safety triggered for %s", label)
        return None
    return result


@dataclass
class VaultInspection:
    """What was verified for one vault during a comparison run."""

    index: int
    opened: bool = False
    checks: List[SectionCheck] = field(default_factory=list)
    returned_to_list: bool = False

    @property
    def found_sections(self) -> List[str]:
        return [check.name for check in self.checks if check.found]


async def inspect_vault_detail(detail_page: VaultDetailPage, include_risk: bool = True) -> List[SectionCheck]:
    """Run every detail verification in page order, stopping if the page closes."""
    steps = [
        detail_page.verify_performance_chart,
        detail_page.verify_assets_section,
        detail_page.verify_strategy_settings,
        detail_page.verify_deposit_withdraw,
    ]
    if include_risk:
        steps.append(detail_page.verify_risk_warning)

    checks: List[SectionCheck] = []
    for step in steps:
        if not detail_page.is_available():
            logger.info("Page closed, skipping remaining detail checks")
            break
        checks.append(await step())
    return checks


async def process_vault_details(
    index: int,
    list_page: VaultListPage,
    detail_page: VaultDetailPage,
) -> VaultInspection:
    """Open the vault at ``index`` on the sorted list, inspect it, and come back."""
    inspection = VaultInspection(index=index)
    label = f"vault {index + 1}"
    logger.info("Examining %s details...", label)

    if not list_page.is_available():
        logger.info("Page closed, skipping %s details", label)
        return inspection

    vaults = await list_page.find_vaults()
    if index >= len(vaults):
        logger.info("No vault found at index %d, skipping", index + 1)
        return inspection

    inspection.opened = await list_page.browser.soft_click(
        vaults[index], label, timeout=list_page.timeouts.element_appear
    )
    if inspection.opened:
        logger.info("Clicked on %s", label)

    await detail_page.wait_for_detail_page_load()

    sections = [
        ("performance chart", detail_page.verify_performance_chart, PERFORMANCE_TIMEOUT),
        ("assets section", detail_page.verify_assets_section, SECTION_TIMEOUT),
        ("strategy settings", detail_page.verify_strategy_settings, SECTION_TIMEOUT),
        ("deposit/withdraw", detail_page.verify_deposit_withdraw, SECTION_TIMEOUT),
    ]
    for name, step, timeout in sections:
        if not detail_page.is_available():
            logger.info("Page closed, skipping remaining steps for %s", label)
            return inspection
        check = await run_guarded(f"{name} in {label}", step, timeout=timeout)
        if check is not None:
            inspection.checks.append(check)

    if not list_page.is_available():
        return inspection

    try:
        await list_page.goto()
    except Exception as exc:  # noqa: BLE001 - stop this vault, keep the run
        logger.warning("Error returning to vault list from %s: %s", label, exc)
        return inspection
    inspection.returned_to_list = True
    logger.info("Returned to vault list from %s", label)

    if list_page.is_available():
        await run_guarded(f"re-sorting vault list after {label}", list_page.sort_by_apr)
    return inspection


async def compare_vaults(
    list_page: VaultListPage,
    detail_page: VaultDetailPage,
    count: int = 3,
) -> List[VaultInspection]:
    """Sort by APR and inspect up to ``count`` vaults from the top of the list."""
    await list_page.sort_by_apr()
    inspections: List[VaultInspection] = []
    for index in range(count):
        if not list_page.is_available():
            break
        inspections.append(await process_vault_details(index, list_page, detail_page))
    return inspections
