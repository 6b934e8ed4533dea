"""Configuration helpers: runtime settings and search request parsing."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from types import MappingProxyType
import os
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .models import SearchRequest
from .valuation import DEFAULT_VALUATION_TIERS, ValuationTier

USAGE_MESSAGE = "Format: NYC-GRU 2025-12-20 max=50000"

DEFAULT_BRL_TO_USD = Decimal("5.8")
DEFAULT_FALLBACK_AIRLINE = "GOL"

DEFAULT_ORIGIN_ALIASES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {"NYC": ("JFK", "LGA", "EWR")}
)

_QUERY_PATTERN = re.compile(
    r"(?P<origin>[A-Z]{3})-(?P<dest>[A-Z]{3})\s+(?P<date>\d{4}-\d{2}-\d{2})(?:\s+MAX=(?P<max>\d+))?",
    re.IGNORECASE,
)
_AIRPORT_PATTERN = re.compile(r"^[A-Z]{3}$")
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AwardSettings:
    """Constants driving conversion, valuation and origin expansion."""

    brl_to_usd: Decimal = DEFAULT_BRL_TO_USD
    valuation_tiers: Tuple[ValuationTier, ...] = DEFAULT_VALUATION_TIERS
    fallback_airline: str = DEFAULT_FALLBACK_AIRLINE
    origin_aliases: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: DEFAULT_ORIGIN_ALIASES
    )
    browser_fallback: bool = True
    http_timeout: float = 20.0

    def expand_origin(self, origin_city: str) -> List[str]:
        """Return the airport codes behind ``origin_city`` in search order."""

        key = origin_city.strip().upper()
        return list(self.origin_aliases.get(key, (key,)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brl_to_usd": str(self.brl_to_usd),
            "valuation_tiers": [
                {"upper_bound": tier.upper_bound, "rate": str(tier.rate)}
                for tier in self.valuation_tiers
            ],
            "fallback_airline": self.fallback_airline,
            "origin_aliases": {key: list(codes) for key, codes in self.origin_aliases.items()},
            "browser_fallback": self.browser_fallback,
            "http_timeout": self.http_timeout,
        }


def _parse_date(value: str | None) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _parse_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    cleaned = re.sub(r"(?<=\d)[.,](?=\d{3}(?:\D|$))", "", str(value).strip())
    try:
        return int(cleaned)
    except ValueError:
        return None


def _parse_decimal(value: str, setting: str) -> Decimal:
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError(f"{setting} must be a number, got {value!r}") from exc
    if not parsed.is_finite() or parsed <= 0:
        raise ValueError(f"{setting} must be a positive number, got {value!r}")
    return parsed


def _ensure_list(value: str | Iterable[str] | None) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        if not value:
            return []
        return [item.strip() for item in value.split(",") if item.strip()]
    return [item for item in value if item]


def parse_valuation_tiers(value: str) -> Tuple[ValuationTier, ...]:
    """Parse ``"20000:0.005,40000:0.0045,*:0.004"`` into valuation tiers.

    Bounds must increase and only the last entry may be open-ended (``*``).
    """

    tiers: List[ValuationTier] = []
    for item in _ensure_list(value):
        bound_text, sep, rate_text = item.partition(":")
        if not sep:
            raise ValueError(f"Valuation tier {item!r} must look like 'bound:rate'")
        if tiers and tiers[-1].upper_bound is None:
            raise ValueError("Only the last valuation tier may be open-ended")
        bound_text = bound_text.strip()
        upper_bound = None if bound_text == "*" else _parse_int(bound_text)
        if bound_text != "*" and upper_bound is None:
            raise ValueError(f"Valuation tier bound {bound_text!r} is not a number")
        if tiers and upper_bound is not None and upper_bound <= (tiers[-1].upper_bound or 0):
            raise ValueError("Valuation tier bounds must be increasing")
        tiers.append(ValuationTier(upper_bound, _parse_decimal(rate_text, "AWARD_VALUATION_TIERS")))
    if not tiers:
        raise ValueError("AWARD_VALUATION_TIERS must define at least one tier")
    return tuple(tiers)


def parse_origin_aliases(value: str) -> Mapping[str, Tuple[str, ...]]:
    """Parse ``"NYC:JFK/LGA/EWR,SAO:GRU/CGH"`` into an alias table."""

    aliases: Dict[str, Tuple[str, ...]] = {}
    for item in _ensure_list(value):
        alias, sep, codes_text = item.partition(":")
        codes = tuple(code.strip().upper() for code in codes_text.split("/") if code.strip())
        if not sep or not alias.strip() or not codes:
            raise ValueError(f"Origin alias {item!r} must look like 'NYC:JFK/LGA/EWR'")
        aliases[alias.strip().upper()] = codes
    return MappingProxyType(aliases)


def load_settings(environ: Mapping[str, str] | None = None) -> AwardSettings:
    """Build :class:`AwardSettings` from environment variables."""

    env = os.environ if environ is None else environ

    brl_to_usd = DEFAULT_BRL_TO_USD
    if env.get("AWARD_BRL_TO_USD"):
        brl_to_usd = _parse_decimal(env["AWARD_BRL_TO_USD"], "AWARD_BRL_TO_USD")

    tiers = DEFAULT_VALUATION_TIERS
    if env.get("AWARD_VALUATION_TIERS"):
        tiers = parse_valuation_tiers(env["AWARD_VALUATION_TIERS"])

    aliases = DEFAULT_ORIGIN_ALIASES
    if env.get("AWARD_ORIGIN_ALIASES"):
        aliases = parse_origin_aliases(env["AWARD_ORIGIN_ALIASES"])

    browser_fallback = env.get("AWARD_BROWSER_FALLBACK", "1").strip().lower() in _TRUE_VALUES
    http_timeout = float(_parse_decimal(env.get("AWARD_HTTP_TIMEOUT", "20"), "AWARD_HTTP_TIMEOUT"))

    return AwardSettings(
        brl_to_usd=brl_to_usd,
        valuation_tiers=tiers,
        fallback_airline=(env.get("AWARD_FALLBACK_AIRLINE") or "").strip() or DEFAULT_FALLBACK_AIRLINE,
        origin_aliases=aliases,
        browser_fallback=browser_fallback,
        http_timeout=http_timeout,
    )


@lru_cache()
def get_settings() -> AwardSettings:
    """Return process-wide settings loaded once from the environment."""
    return load_settings()


def parse_search_request(message: str) -> Optional[SearchRequest]:
    """Parse ``"NYC-GRU 2025-12-20 max=50000"`` style messages.

    Returns ``None`` for anything that does not match; callers answer with
    :data:`USAGE_MESSAGE`.
    """

    match = _QUERY_PATTERN.search(message.strip().upper())
    if not match:
        return None
    departure_date = _parse_date(match.group("date"))
    if departure_date is None:
        return None
    return SearchRequest(
        origin_city=match.group("origin"),
        dest_code=match.group("dest"),
        departure_date=departure_date,
        max_points=_parse_int(match.group("max")),
    )


def create_request_from_form(form_data: Mapping[str, Any]) -> Optional[SearchRequest]:
    """Create a request from a form or JSON payload.

    Either a free-text ``message`` field or the explicit ``origin``,
    ``destination``, ``date`` and ``max_points`` fields are accepted.
    """

    message = form_data.get("message") or form_data.get("Body")
    if message:
        return parse_search_request(str(message))

    origin = str(form_data.get("origin") or "").strip().upper()
    destination = str(form_data.get("destination") or "").strip().upper()
    if not _AIRPORT_PATTERN.match(origin) or not _AIRPORT_PATTERN.match(destination):
        return None
    departure_date = _parse_date(str(form_data.get("date") or ""))
    if departure_date is None:
        return None

    max_points = _parse_int(form_data.get("max_points") or form_data.get("max"))
    return SearchRequest(
        origin_city=origin,
        dest_code=destination,
        departure_date=departure_date,
        max_points=max_points,
    )


def create_request(data: Mapping[str, Any] | str) -> Optional[SearchRequest]:
    """Unified helper that accepts either dict-like data or raw text."""

    if isinstance(data, Mapping):
        return create_request_from_form(data)
    if isinstance(data, str):
        return parse_search_request(data)
    raise TypeError("Unsupported search payload type")


__all__ = [
    "AwardSettings",
    "DEFAULT_ORIGIN_ALIASES",
    "USAGE_MESSAGE",
    "create_request",
    "create_request_from_form",
    "get_settings",
    "load_settings",
    "parse_origin_aliases",
    "parse_search_request",
    "parse_valuation_tiers",
]
