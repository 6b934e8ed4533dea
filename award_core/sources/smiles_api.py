"""Client for the Smiles award search API."""
from __future__ import annotations

import asyncio
from datetime import date
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from award_core.models import RawOffer, SourceError

LOGGER = logging.getLogger(__name__)

PROVIDER = "smiles-api"
SEARCH_ENDPOINT = "https://flightsearch.smiles.com.br/search"

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Origin": "https://www.smiles.com.br",
    "Referer": "https://www.smiles.com.br/",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}


class SmilesApiError(SourceError):
    """Non-200 answer or transport failure talking to the Smiles API."""


def build_search_payload(origin: str, destination: str, departure_date: date) -> Dict[str, Any]:
    """Return the JSON body for a one-way, one-adult award search."""

    return {
        "adults": 1,
        "children": 0,
        "infants": 0,
        "cabin": 0,
        "currencyCode": "BRL",
        "originAirportCode": origin,
        "destinationAirportCode": destination,
        "departureDate": departure_date.isoformat(),
        "tripType": 1,
        "forceCongener": False,
        "isFlexibleDate": False,
    }


class SmilesApiClient:
    """Fetch raw award flights for one origin from the Smiles search API."""

    def __init__(
        self,
        endpoint: str = SEARCH_ENDPOINT,
        timeout: float = 20.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session

    async def fetch(self, origin: str, destination: str, departure_date: date) -> List[RawOffer]:
        payload = build_search_payload(origin, destination, departure_date)
        try:
            if self._session is not None:
                data = await self._post(self._session, payload)
            else:
                timeout = aiohttp.ClientTimeout(total=self.timeout)
                async with aiohttp.ClientSession(timeout=timeout) as session:
                    data = await self._post(session, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise SmilesApiError(f"Smiles API request failed for {origin}-{destination}: {exc}") from exc

        flights = data.get("flights") if isinstance(data, dict) else None
        if not isinstance(flights, list):
            LOGGER.info("Smiles API returned no flight list for %s-%s", origin, destination)
            return []
        return [
            RawOffer(provider=PROVIDER, kind="api", payload=flight)
            for flight in flights
            if isinstance(flight, dict)
        ]

    async def _post(self, session: aiohttp.ClientSession, payload: Dict[str, Any]) -> Any:
        async with session.post(self.endpoint, json=payload, headers=DEFAULT_HEADERS) as response:
            if response.status != 200:
                error_text = await response.text()
                raise SmilesApiError(f"HTTP {response.status} – {error_text[:120]}")
            return await response.json(content_type=None)


__all__ = ["SmilesApiClient", "SmilesApiError", "build_search_payload"]
