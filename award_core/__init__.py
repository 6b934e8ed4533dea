"""Award core package exposing the award search pipeline."""
from .config import AwardSettings, USAGE_MESSAGE, create_request, get_settings, parse_search_request
from .models import FlightOffer, RawOffer, SearchRequest
from .workflow import APOLOGY_MESSAGE, SearchResult, run_search, search

__all__ = [
    "APOLOGY_MESSAGE",
    "AwardSettings",
    "FlightOffer",
    "RawOffer",
    "SearchRequest",
    "SearchResult",
    "USAGE_MESSAGE",
    "create_request",
    "get_settings",
    "parse_search_request",
    "run_search",
    "search",
]
