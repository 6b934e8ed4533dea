"""Reusable Playwright helpers shared by page scrapers."""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

from playwright.async_api import Page

CONSENT_SELECTORS = (
    "button:has-text('Aceitar')",
    "button:has-text('Aceitar todos')",
    "button:has-text('Accept')",
    "button#onetrust-accept-btn-handler",
)


async def dismiss_common_banners(page: Page, selectors: Sequence[str] = CONSENT_SELECTORS) -> None:
    """Attempt to dismiss cookie/consent banners that block results."""

    for selector in selectors:
        try:
            await page.locator(selector).first.click(timeout=1500)
            break
        except Exception:
            continue


async def extract_text(handle: Any, selectors: Sequence[str]) -> Optional[str]:
    """Return the first non-empty text found using the provided selectors."""

    for selector in selectors:
        try:
            element = await handle.query_selector(selector)
        except Exception:
            continue
        if element is None:
            continue
        try:
            text = await element.inner_text()
        except Exception:
            try:
                text = await element.text_content()
            except Exception:
                text = None
        if text:
            stripped = text.strip()
            if stripped:
                return stripped
    return None


async def collect_cards(page: Page, selectors: Sequence[str]) -> List[Any]:
    """Return result cards by iterating through fallback selectors."""

    for selector in selectors:
        try:
            cards = await page.query_selector_all(selector)
        except Exception:
            continue
        if cards:
            return cards
    return []
