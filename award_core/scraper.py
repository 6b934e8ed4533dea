"""Raw award retrieval: the Smiles API first, the results page as fallback."""
from __future__ import annotations

from datetime import date
import logging
from typing import Awaitable, Callable, List, Optional

from .config import AwardSettings, get_settings
from .models import RawOffer, SourceError
from .sources import SmilesApiClient, scrape_smiles_page

LOGGER = logging.getLogger(__name__)

PageScraper = Callable[[str, str, date], Awaitable[List[RawOffer]]]


class SmilesAwardSource:
    """Raw offer source combining the search API with a browser fallback.

    The page scraper only runs when the API fails or has no flights and the
    browser fallback is enabled. If every backend fails the last error is
    raised so the caller can count the origin as failed.
    """

    def __init__(
        self,
        api_client: Optional[SmilesApiClient] = None,
        page_scraper: Optional[PageScraper] = scrape_smiles_page,
        settings: AwardSettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.api_client = api_client or SmilesApiClient(timeout=settings.http_timeout)
        self.page_scraper = page_scraper if settings.browser_fallback else None

    async def fetch(self, origin: str, destination: str, departure_date: date) -> List[RawOffer]:
        api_error: Optional[SourceError] = None
        try:
            offers = await self.api_client.fetch(origin, destination, departure_date)
        except SourceError as exc:
            LOGGER.warning("Smiles API failed for %s-%s: %s", origin, destination, exc)
            api_error = exc
            offers = []

        if offers or self.page_scraper is None:
            if api_error is not None:
                raise api_error
            return offers

        LOGGER.info("Falling back to page scraping for %s-%s", origin, destination)
        offers = await self.page_scraper(origin, destination, departure_date)
        if not offers and api_error is not None:
            raise api_error
        return offers


__all__ = ["PageScraper", "SmilesAwardSource"]
