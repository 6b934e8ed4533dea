"""Shared data structures used across retrieval, processing and reporting."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class RawOffer:
    """A raw award record as returned by a retrieval backend.

    ``kind`` tells the extractor how to read ``payload``: ``"api"`` for JSON
    fare objects, ``"page"`` for text fragments scraped from a results page.
    """

    provider: str
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"provider": self.provider, "kind": self.kind, "payload": self.payload}


@dataclass(frozen=True)
class FlightOffer:
    """Canonical award offer for a single flight."""

    airline: str
    origin_code: str
    dest_code: str
    departure_time: str
    arrival_time: str
    economy_points: Optional[int] = None
    business_points: Optional[int] = None
    taxes_brl: Decimal = Decimal("0")

    @property
    def has_economy(self) -> bool:
        return self.economy_points is not None and self.economy_points > 0

    @property
    def has_business(self) -> bool:
        return self.business_points is not None and self.business_points > 0

    @property
    def lowest_points(self) -> Optional[int]:
        available = [
            points for points in (self.economy_points, self.business_points) if points
        ]
        return min(available) if available else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "airline": self.airline,
            "origin": self.origin_code,
            "destination": self.dest_code,
            "departure_time": self.departure_time,
            "arrival_time": self.arrival_time,
            "economy_points": self.economy_points,
            "business_points": self.business_points,
            "taxes_brl": str(self.taxes_brl),
        }


@dataclass(frozen=True)
class SearchRequest:
    """A parsed award search: route, travel date and optional points ceiling."""

    origin_city: str
    dest_code: str
    departure_date: date
    max_points: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "origin": self.origin_city,
            "destination": self.dest_code,
            "date": self.departure_date.isoformat(),
            "max_points": self.max_points,
        }


class SourceError(RuntimeError):
    """Raised when a raw offer source cannot deliver records for an origin."""


class RawOfferSource(Protocol):
    """Anything that can produce raw award records for one origin."""

    async def fetch(self, origin: str, destination: str, departure_date: date) -> List[RawOffer]:
        ...
