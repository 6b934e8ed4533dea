"""Raw offer sources backed by the Smiles API and results page."""
from .smiles_api import SmilesApiClient, SmilesApiError
from .smiles_playwright import PageScrapeError, scrape_smiles_page

__all__ = ["PageScrapeError", "SmilesApiClient", "SmilesApiError", "scrape_smiles_page"]
