#!/usr/bin/env python3
"""
Capture screenshots of every vault UI state for visual review.

Walks the vaults list (initial, APR sort, search), the first vault's detail
page with all sections, the wallet's positions page and the Create Vault form.

Usage:
    python -m vault_ui_tests.capture_ui_screenshots --target staging --output ./shots
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from playwright.async_api import Error as PlaywrightError

from vault_ui_tests.browser import Browser, ToolError, browser_session
from vault_ui_tests.config import TARGET_BASE_URLS, settings
from vault_ui_tests.pages import CreateVaultPage, PositionsPage, VaultDetailPage, VaultListPage
from vault_ui_tests.wallet import WalletConnectionError, connect_wallet
from vault_ui_tests.workflows import inspect_vault_detail

Capture = Tuple[str, Path]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Capture vault UI screenshots for review")
    parser.add_argument(
        "--target",
        choices=sorted(TARGET_BASE_URLS),
        default=None,
        help="Application instance (default: VAULT_UI_TARGET)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Screenshot directory (default: SCREENSHOT_DIR)")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    return parser


async def _shot(browser: Browser, name: str, captures: List[Capture]) -> None:
    print(f"📸 Capturing {name}...")
    path = await browser.screenshot(name)
    if path:
        captures.append((name, path))


async def capture_vault_list(browser: Browser, captures: List[Capture]) -> bool:
    list_page = VaultListPage(browser)
    try:
        await list_page.goto()
    except ToolError as exc:
        print(f"❌ ERROR: Could not load the vaults page: {exc}")
        return False

    await list_page.wait_for_page_load()
    try:
        await connect_wallet(browser)
    except WalletConnectionError as exc:
        print(f"⚠️  Wallet connection failed, capturing disconnected state: {exc}")
    await _shot(browser, "vaults-page", captures)

    # The page loaded once; later failures only cost the sort and search shots
    try:
        await list_page.sort_by_apr()
        await _shot(browser, "vaults-sorted", captures)

        if await list_page.test_search("ETH"):
            await _shot(browser, "vaults-search", captures)
        await list_page.goto()
        await list_page.sort_by_apr()
    except (ToolError, PlaywrightError) as exc:
        print(f"⚠️  Vault list capture incomplete: {exc}")
    return True


async def capture_vault_detail(browser: Browser, captures: List[Capture]) -> None:
    list_page = VaultListPage(browser)
    detail_page = VaultDetailPage(browser)

    vault = await list_page.find_first_vault()
    if not vault:
        print("⚠️  No vaults listed, skipping detail page")
        return
    if not await browser.soft_click(vault, "first vault", timeout=settings.timeouts.element_appear):
        print("⚠️  Could not open the first vault, skipping detail page")
        return

    await detail_page.wait_for_detail_page_load()
    await _shot(browser, "vault-detail-page", captures)
    for check in await inspect_vault_detail(detail_page):
        status = "✅" if check.found else "➖"
        print(f"   {status} {check.name}")
    await _shot(browser, "vault-detail-sections", captures)


async def capture_positions(browser: Browser, captures: List[Capture]) -> None:
    positions_page = PositionsPage(browser)
    try:
        await positions_page.goto()
    except ToolError as exc:
        print(f"⚠️  Could not load the positions page: {exc}")
        return
    await _shot(browser, "positions-page", captures)
    if await positions_page.count_positions(timeout=settings.timeouts.element_appear):
        await positions_page.open_first_position_action()
    await _shot(browser, "positions-page-final", captures)


async def capture_create_vault(browser: Browser, captures: List[Capture]) -> None:
    list_page = VaultListPage(browser)
    form = CreateVaultPage(browser)
    try:
        await list_page.goto()
        await form.open_form()
    except ToolError as exc:
        print(f"⚠️  Could not open the Create Vault form: {exc}")
        return
    await _shot(browser, "create-vault-form-open", captures)


async def capture_all(output: Optional[Path], headless: Optional[bool]) -> List[Capture]:
    """Run every capture step. An empty list means the vaults page never loaded."""
    captures: List[Capture] = []
    async with browser_session(screenshot_dir=output, headless=headless) as browser:
        print(f"📁 Screenshots will be saved to: {browser.screenshots.directory}")

        print("=" * 60)
        print("VAULTS LIST")
        print("=" * 60)
        if not await capture_vault_list(browser, captures):
            return []

        steps = (
            ("VAULT DETAIL", capture_vault_detail),
            ("POSITIONS", capture_positions),
            ("CREATE VAULT", capture_create_vault),
        )
        for title, step in steps:
            print("\n" + "=" * 60)
            print(title)
            print("=" * 60)
            try:
                await step(browser, captures)
            except (ToolError, PlaywrightError) as exc:
                print(f"⚠️  {title.title()} capture failed: {exc}")
    return captures


async def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    profile = settings.profile(args.target or settings.target)

    with settings.use_profile(profile):
        print("🎬 Starting Vault UI Screenshot Capture")
        print(f"📍 Target: {profile.name} ({settings.base_url})")
        print(f"👛 Wallet: {settings.wallet_address}")
        print()

        captures = await capture_all(args.output, False if args.headed else None)

    if not captures:
        print("\n❌ Vaults page could not be captured, aborting")
        return 1

    print("\n" + "=" * 60)
    print("SCREENSHOT SUMMARY")
    print("=" * 60)
    print(f"✅ Captured {len(captures)} screenshots")
    for name, path in captures:
        status = "✅" if Path(path).exists() else "❌"
        print(f"  {status} {name}: {path}")
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
