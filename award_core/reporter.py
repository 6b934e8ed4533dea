"""Reporting helpers rendering grouped offers into chat-sized text."""
from __future__ import annotations

from typing import List, Optional, Sequence

from .config import AwardSettings, get_settings
from .models import FlightOffer
from .processor import BOTH_CABINS, BUSINESS_ONLY, ECONOMY_ONLY, CategorySection
from .valuation import convert_to_usd, estimate_points_value

NO_RESULTS_MESSAGE = "No award space found under your max points."
REPORT_TITLE = "Award space found!"

CATEGORY_TITLES = {
    BOTH_CABINS: "Economy + Business",
    ECONOMY_ONLY: "Economy only",
    BUSINESS_ONLY: "Business only",
}

_PLACEHOLDER = "-"


def to_12h(value: str) -> str:
    """Render ``"HH:MM"`` as ``"8:05am"``; an empty time stays empty."""

    if not value:
        return ""
    hour_text, _, minute_text = value.partition(":")
    hour, minute = int(hour_text), int(minute_text)
    period = "pm" if hour >= 12 else "am"
    return f"{hour % 12 or 12}:{minute:02d}{period}"


def _points(value: Optional[int]) -> str:
    return str(value) if value else _PLACEHOLDER


def format_offer(offer: FlightOffer, settings: AwardSettings) -> List[str]:
    """Return the lines describing a single offer."""

    taxes_usd = convert_to_usd(offer.taxes_brl, settings.brl_to_usd)
    lines = [
        f"{offer.origin_code} {to_12h(offer.departure_time)} – {offer.dest_code} {to_12h(offer.arrival_time)}",
        f"  Economy: {_points(offer.economy_points)} | Business: {_points(offer.business_points)}",
        f"  Lowest: {offer.lowest_points} pts + ${taxes_usd} taxes",
    ]
    for cabin, points in (("economy", offer.economy_points), ("business", offer.business_points)):
        if points:
            value = estimate_points_value(points, settings.valuation_tiers)
            lines.append(f"  Est. {cabin} value: ${value}")
    return lines


def render_report(
    sections: Sequence[CategorySection], settings: AwardSettings | None = None
) -> str:
    """Render grouped offers in the order they were handed over."""

    if not sections:
        return NO_RESULTS_MESSAGE

    settings = settings or get_settings()
    lines: List[str] = [REPORT_TITLE]
    for section in sections:
        lines.append("")
        lines.append(f"== {CATEGORY_TITLES.get(section.category, section.category)} ==")
        for bucket in section.buckets:
            lines.append(f"{bucket.origin_code} / {bucket.airline}")
            for offer in bucket.offers:
                lines.extend(format_offer(offer, settings))
    return "\n".join(lines)


__all__ = [
    "CATEGORY_TITLES",
    "NO_RESULTS_MESSAGE",
    "format_offer",
    "render_report",
    "to_12h",
]
