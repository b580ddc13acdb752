from __future__ import annotations

from yarl import URL

from subgrab.errors import InvalidUrlError

BASE_URL = "https://www.opensubtitles.org"


def _parse_url(raw: str) -> URL:
    try:
        url = URL(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidUrlError(f"invalid url: {raw}") from exc
    if url.scheme not in {"http", "https"} or not url.host:
        raise InvalidUrlError(f"invalid url: {raw}")
    return url


def search_url(language: str, fingerprint: str) -> URL:
    return _parse_url(f"{BASE_URL}/pl/search/sublanguageid-{language}/moviehash-{fingerprint}")


def resolve_link(href: str) -> URL:
    """Absolute URL for a link that the site may emit either absolute or path-only."""
    if href.startswith(BASE_URL):
        return _parse_url(href)
    return _parse_url(f"{BASE_URL}{href}")
