"""High level orchestration for running an award search."""
from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional, Tuple

from .config import AwardSettings, get_settings
from .extractor import extract_offers
from .models import FlightOffer, RawOfferSource, SearchRequest
from .processor import filter_offers, group_offers, summarise_offers
from .reporter import render_report
from .scraper import SmilesAwardSource

LOGGER = logging.getLogger(__name__)

APOLOGY_MESSAGE = "Sorry, try again."


@dataclass
class SearchResult:
    """Result returned by :func:`run_search`."""

    request: SearchRequest
    offers: List[FlightOffer]
    report: str
    failed_origins: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "request": self.request.to_dict(),
            "summary": summarise_offers(self.offers),
            "offers": [offer.to_dict() for offer in self.offers],
            "report": self.report,
            "failed_origins": list(self.failed_origins),
            "error": self.error,
        }


async def collect_offers(
    request: SearchRequest, source: RawOfferSource, settings: AwardSettings
) -> Tuple[List[FlightOffer], List[str]]:
    """Fetch and extract offers for every origin behind ``request.origin_city``.

    Origins are queried concurrently but the combined list always follows
    the origin order. A failing origin contributes nothing and is returned
    in the second element.
    """

    origins = settings.expand_origin(request.origin_city)
    results = await asyncio.gather(
        *(source.fetch(origin, request.dest_code, request.departure_date) for origin in origins),
        return_exceptions=True,
    )

    offers: List[FlightOffer] = []
    failed: List[str] = []
    for origin, result in zip(origins, results):
        if isinstance(result, Exception):
            LOGGER.warning(
                "Award retrieval failed for %s-%s on %s: %s",
                origin,
                request.dest_code,
                request.departure_date.isoformat(),
                result,
            )
            failed.append(origin)
            continue
        if isinstance(result, BaseException):
            raise result
        offers.extend(
            extract_offers(result or [], origin, request.dest_code, settings.fallback_airline)
        )
    return offers, failed


def build_report_text(
    offers: List[FlightOffer], max_points: Optional[int], settings: AwardSettings
) -> str:
    """Filter, group and render ``offers`` into the reply text."""

    return render_report(group_offers(filter_offers(offers, max_points)), settings)


def _run_async(coro_factory):
    """Run a coroutine from synchronous code, even inside a running loop.

    With a loop already running on this thread the coroutine gets its own
    loop on a worker thread.
    """

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro_factory())
    with ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(lambda: asyncio.run(coro_factory())).result()


def run_search(
    request: SearchRequest,
    source: RawOfferSource | None = None,
    settings: AwardSettings | None = None,
) -> SearchResult:
    """Execute the full retrieval and reporting pipeline for one request."""

    settings = settings or get_settings()
    if source is None:
        source = SmilesAwardSource(settings=settings)

    offers: List[FlightOffer] = []
    failed: List[str] = []
    try:
        offers, failed = _run_async(lambda: collect_offers(request, source, settings))
        report = build_report_text(offers, request.max_points, settings)
    except Exception as exc:
        LOGGER.exception("Award search failed for %s", request)
        return SearchResult(
            request=request, offers=offers, report=APOLOGY_MESSAGE, failed_origins=failed, error=str(exc)
        )
    return SearchResult(request=request, offers=offers, report=report, failed_origins=failed)


def search(
    request: SearchRequest,
    source: RawOfferSource | None = None,
    settings: AwardSettings | None = None,
) -> str:
    """Return only the reply text for ``request``."""

    return run_search(request, source=source, settings=settings).report


__all__ = [
    "APOLOGY_MESSAGE",
    "SearchResult",
    "build_report_text",
    "collect_offers",
    "run_search",
    "search",
]
