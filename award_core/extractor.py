"""Turn raw provider records into canonical :class:`FlightOffer` objects."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import FlightOffer, RawOffer

LOGGER = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"(?<!\d)(\d{1,2}):(\d{2})(?!\d)")
POINTS_PATTERN = re.compile(r"(?<!\d)(\d{1,5})(?!\d)")
BRL_PATTERN = re.compile(r"R\$\s*(\d[\d.]*(?:,\d+)?)", re.IGNORECASE)
_THOUSANDS_PATTERN = re.compile(r"(?<=\d)\.(?=\d{3}(?:\D|$))")
_AIRPORT_PATTERN = re.compile(r"^[A-Z]{3}$")

_ZERO = Decimal("0")


def parse_time(value: Any) -> str:
    """Return the first ``H:MM``/``HH:MM`` in ``value`` as zero-padded ``HH:MM``.

    Anything else, including out of range hours or minutes, gives ``""``.
    """

    if not isinstance(value, str):
        return ""
    match = TIME_PATTERN.search(value)
    if not match:
        return ""
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return ""
    return f"{hour:02d}:{minute:02d}"


def parse_points(value: Any) -> Optional[int]:
    """Read a miles amount from a number or loosely formatted text.

    Zero, negative and unreadable values all mean "no award space".
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            points = int(value)
        except (ValueError, OverflowError):
            return None
        return points if points > 0 else None
    if not isinstance(value, str):
        return None
    match = POINTS_PATTERN.search(_THOUSANDS_PATTERN.sub("", value))
    if not match:
        return None
    points = int(match.group(1))
    return points if points > 0 else None


def parse_brl(value: Any) -> Decimal:
    """Parse Brazilian currency text such as ``"R$ 1.234,56"``.

    Missing or unreadable text is treated as no tax at all.
    """

    if not isinstance(value, str):
        return _ZERO
    match = BRL_PATTERN.search(value)
    if not match:
        return _ZERO
    normalised = match.group(1).replace(".", "").replace(",", ".")
    try:
        return Decimal(normalised)
    except InvalidOperation:
        return _ZERO


def parse_taxes_cents(value: Any) -> Decimal:
    """Convert a numeric tax amount in centavos to reais."""

    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, str):
        return parse_brl(value)
    try:
        amount = Decimal(str(value)) / 100
    except InvalidOperation:
        return _ZERO
    if not amount.is_finite() or amount < 0:
        return _ZERO
    return amount


def _nested(payload: Mapping[str, Any], *path: str) -> Any:
    current: Any = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _api_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    fare = payload.get("recommendedFare") or {}
    airline = payload.get("airline")
    if isinstance(airline, Mapping):
        airline = airline.get("code") or airline.get("name")
    return {
        "airline": airline,
        "origin": _nested(payload, "departure", "airportCode"),
        "destination": _nested(payload, "arrival", "airportCode"),
        "departure": _nested(payload, "departure", "time"),
        "arrival": _nested(payload, "arrival", "time"),
        "economy": parse_points(_nested(fare, "economy", "miles")),
        "business": parse_points(_nested(fare, "business", "miles")),
        "taxes": parse_taxes_cents(fare.get("taxes") if isinstance(fare, Mapping) else None),
    }


def _page_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "airline": payload.get("airline"),
        "origin": payload.get("origin"),
        "destination": payload.get("destination"),
        "departure": payload.get("departure"),
        "arrival": payload.get("arrival"),
        "economy": parse_points(payload.get("economy")),
        "business": parse_points(payload.get("business")),
        "taxes": parse_brl(payload.get("taxes")),
    }


_FIELD_READERS = {
    "api": _api_fields,
    "page": _page_fields,
}


def _airport_code(value: Any, fallback: str) -> str:
    if isinstance(value, str):
        candidate = value.strip().upper()
        if _AIRPORT_PATTERN.match(candidate):
            return candidate
    return fallback.strip().upper()


def extract_offer(
    raw: RawOffer, origin_code: str, dest_code: str, fallback_airline: str
) -> Optional[FlightOffer]:
    """Build a :class:`FlightOffer` from ``raw`` or ``None`` without award space."""

    reader = _FIELD_READERS.get(raw.kind)
    if reader is None:
        LOGGER.debug("Ignoring raw offer of unknown kind %r from %s", raw.kind, raw.provider)
        return None

    fields = reader(raw.payload or {})
    economy = fields["economy"]
    business = fields["business"]
    if economy is None and business is None:
        LOGGER.debug("Dropping raw offer from %s without award space", raw.provider)
        return None

    airline = fields["airline"]
    airline = airline.strip() if isinstance(airline, str) else ""

    return FlightOffer(
        airline=airline or fallback_airline,
        origin_code=_airport_code(fields["origin"], origin_code),
        dest_code=_airport_code(fields["destination"], dest_code),
        departure_time=parse_time(fields["departure"]),
        arrival_time=parse_time(fields["arrival"]),
        economy_points=economy,
        business_points=business,
        taxes_brl=fields["taxes"],
    )


def extract_offers(
    records: Iterable[RawOffer], origin_code: str, dest_code: str, fallback_airline: str
) -> List[FlightOffer]:
    """Extract every usable offer from ``records``, keeping their order."""

    offers: List[FlightOffer] = []
    for raw in records:
        offer = extract_offer(raw, origin_code, dest_code, fallback_airline)
        if offer is not None:
            offers.append(offer)
    return offers


__all__ = [
    "extract_offer",
    "extract_offers",
    "parse_brl",
    "parse_points",
    "parse_taxes_cents",
    "parse_time",
]
