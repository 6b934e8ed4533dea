"""Scrape award results from the Smiles flight search page with Playwright."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
import logging
from typing import Dict, List, Sequence
from urllib.parse import urlencode

from playwright.async_api import Page, async_playwright

from award_core.models import RawOffer, SourceError
from .playwright_common import collect_cards, dismiss_common_banners, extract_text

LOGGER = logging.getLogger(__name__)

PROVIDER = "smiles.com.br"
SEARCH_URL = "https://www.smiles.com.br/mfe/emissao-passagem/"


class PageScrapeError(SourceError):
    """Browser automation against the results page failed."""


@dataclass(frozen=True)
class ResultSelectors:
    """Selectors describing how to read one flight card of the results page."""

    cards: Sequence[str]
    airline: Sequence[str]
    departure: Sequence[str]
    arrival: Sequence[str]
    economy: Sequence[str]
    business: Sequence[str]
    taxes: Sequence[str]


SMILES_SELECTORS = ResultSelectors(
    cards=(
        "[data-testid='flight-card']",
        "div.flight-card",
        "li.flight-list-item",
    ),
    airline=(
        "[data-testid='flight-airline']",
        ".flight-card__airline",
        ".airline-name",
    ),
    departure=(
        "[data-testid='flight-departure']",
        ".flight-card__departure",
        ".departure-time",
    ),
    arrival=(
        "[data-testid='flight-arrival']",
        ".flight-card__arrival",
        ".arrival-time",
    ),
    economy=(
        "[data-testid='fare-economy-miles']",
        ".fare-economy .miles",
        ".economy-miles",
    ),
    business=(
        "[data-testid='fare-business-miles']",
        ".fare-business .miles",
        ".business-miles",
    ),
    taxes=(
        "[data-testid='fare-taxes']",
        ".flight-card__taxes",
        ".taxes",
    ),
)


def build_search_url(origin: str, destination: str, departure_date: date) -> str:
    """Return the results page URL for a one-way, one-adult search."""

    departure = datetime(
        departure_date.year, departure_date.month, departure_date.day, 12, tzinfo=timezone.utc
    )
    params = {
        "adults": 1,
        "children": 0,
        "infants": 0,
        "cabin": "ALL",
        "tripType": 2,
        "segments": 1,
        "searchType": "g3",
        "originAirport": origin,
        "destinationAirport": destination,
        "departureDate": int(departure.timestamp() * 1000),
        "isFlexibleDateChecked": "false",
    }
    return f"{SEARCH_URL}?{urlencode(params)}"


async def search_results_page(
    page: Page,
    origin: str,
    destination: str,
    departure_date: date,
    selectors: ResultSelectors = SMILES_SELECTORS,
) -> List[RawOffer]:
    """Load the results page on ``page`` and return one raw record per card."""

    search_url = build_search_url(origin, destination, departure_date)
    await page.goto(search_url, wait_until="networkidle")
    await dismiss_common_banners(page)

    cards = await collect_cards(page, selectors.cards)
    offers: List[RawOffer] = []
    for card in cards:
        payload: Dict[str, object] = {
            "origin": origin,
            "destination": destination,
            "source": search_url,
        }
        for name in ("airline", "departure", "arrival", "economy", "business", "taxes"):
            text = await extract_text(card, getattr(selectors, name))
            if text:
                payload[name] = text
        offers.append(RawOffer(provider=PROVIDER, kind="page", payload=payload))

    LOGGER.debug("Scraped %d cards for %s-%s", len(offers), origin, destination)
    return offers


async def scrape_smiles_page(origin: str, destination: str, departure_date: date) -> List[RawOffer]:
    """Run a headless browser for one search and return the scraped records."""

    try:
        async with async_playwright() as p:  # pragma: no cover - network heavy
            browser = await p.firefox.launch(headless=True)
            try:
                context = await browser.new_context(locale="pt-BR")
                page = await context.new_page()
                return await search_results_page(page, origin, destination, departure_date)
            finally:
                await browser.close()
    except SourceError:
        raise
    except Exception as exc:  # pragma: no cover - depends on browser/network
        raise PageScrapeError(f"Page scraping failed for {origin}-{destination}: {exc}") from exc


__all__ = [
    "PageScrapeError",
    "ResultSelectors",
    "SMILES_SELECTORS",
    "build_search_url",
    "scrape_smiles_page",
    "search_results_page",
]
