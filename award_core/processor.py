"""Filtering and grouping of normalised award offers."""
from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .models import FlightOffer

BOTH_CABINS = "both"
ECONOMY_ONLY = "economy"
BUSINESS_ONLY = "business"

CATEGORY_ORDER = (BOTH_CABINS, ECONOMY_ONLY, BUSINESS_ONLY)

_COLUMNS = [
    "position",
    "origin_code",
    "airline",
    "departure_time",
    "economy_points",
    "business_points",
    "category",
    "offer",
]


@dataclass
class OfferBucket:
    """Offers sharing an origin airport and airline, sorted by departure."""

    origin_code: str
    airline: str
    offers: List[FlightOffer] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "origin": self.origin_code,
            "airline": self.airline,
            "offers": [offer.to_dict() for offer in self.offers],
        }


@dataclass
class CategorySection:
    """All buckets for one cabin coverage category."""

    category: str
    buckets: List[OfferBucket] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "category": self.category,
            "buckets": [bucket.to_dict() for bucket in self.buckets],
        }


def cabin_category(offer: FlightOffer) -> str:
    """Return which cabins ``offer`` has award space in."""

    if offer.has_economy and offer.has_business:
        return BOTH_CABINS
    if offer.has_economy:
        return ECONOMY_ONLY
    if offer.has_business:
        return BUSINESS_ONLY
    raise ValueError(f"Offer without award space reached grouping: {offer!r}")


def offers_to_dataframe(offers: Iterable[FlightOffer]) -> pd.DataFrame:
    """Convert offers into a :class:`~pandas.DataFrame`, one row per offer.

    The original objects are kept in the ``offer`` column and ``position``
    records the input order.
    """

    records: List[Dict[str, object]] = []
    for position, offer in enumerate(offers):
        records.append(
            {
                "position": position,
                "origin_code": offer.origin_code,
                "airline": offer.airline,
                "departure_time": offer.departure_time,
                "economy_points": offer.economy_points if offer.economy_points else math.nan,
                "business_points": offer.business_points if offer.business_points else math.nan,
                "category": cabin_category(offer),
                "offer": offer,
            }
        )
    return pd.DataFrame.from_records(records, columns=_COLUMNS)


def filter_offers(offers: Iterable[FlightOffer], ceiling: Optional[int]) -> List[FlightOffer]:
    """Keep offers whose cheaper cabin costs at most ``ceiling`` points.

    ``None`` means no ceiling. Input order is preserved.
    """

    offer_list = list(offers)
    if ceiling is None or not offer_list:
        return offer_list

    df = offers_to_dataframe(offer_list)
    lowest = df[["economy_points", "business_points"]].min(axis=1).fillna(math.inf)
    kept = df[lowest <= ceiling]
    return list(kept["offer"])


def group_offers(offers: Iterable[FlightOffer]) -> List[CategorySection]:
    """Partition offers by cabin coverage, then by (origin, airline).

    Buckets appear in first-seen order and each bucket is sorted by the
    ``HH:MM`` departure string; offers without a time sort first. Empty
    categories are left out.
    """

    df = offers_to_dataframe(offers)
    if df.empty:
        return []

    sections: List[CategorySection] = []
    for category in CATEGORY_ORDER:
        subset = df[df["category"] == category]
        if subset.empty:
            continue
        buckets: List[OfferBucket] = []
        for (origin_code, airline), bucket in subset.groupby(["origin_code", "airline"], sort=False):
            ordered = bucket.sort_values(["departure_time", "position"], kind="stable")
            buckets.append(
                OfferBucket(
                    origin_code=str(origin_code),
                    airline=str(airline),
                    offers=list(ordered["offer"]),
                )
            )
        sections.append(CategorySection(category=category, buckets=buckets))
    return sections


def summarise_offers(offers: List[FlightOffer]) -> Dict[str, object]:
    """Return simple statistics across the offers."""

    lowest = [offer.lowest_points for offer in offers if offer.lowest_points is not None]
    if not lowest:
        return {"count": 0, "min_points": None, "origins": []}

    origins: List[str] = []
    for offer in offers:
        if offer.origin_code not in origins:
            origins.append(offer.origin_code)
    return {
        "count": len(lowest),
        "min_points": min(lowest),
        "origins": origins,
    }


__all__ = [
    "BOTH_CABINS",
    "BUSINESS_ONLY",
    "CATEGORY_ORDER",
    "CategorySection",
    "ECONOMY_ONLY",
    "OfferBucket",
    "cabin_category",
    "filter_offers",
    "group_offers",
    "offers_to_dataframe",
    "summarise_offers",
]
