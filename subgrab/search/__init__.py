"""Search helpers: query URLs, site access and result page parsing."""

from .parsers import parse_candidates, parse_download_url
from .site_client import SiteClient
from .types import SearchCandidate
from .url_utils import BASE_URL, resolve_link, search_url

__all__ = [
    "BASE_URL",
    "SearchCandidate",
    "SiteClient",
    "parse_candidates",
    "parse_download_url",
    "resolve_link",
    "search_url",
]
