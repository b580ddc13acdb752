"""Shared data structures for the search helpers."""

from dataclasses import dataclass

from yarl import URL


@dataclass(frozen=True)
class SearchCandidate:
    """One row of the search results table."""

    name: str
    flag: str
    cd: str
    sent: str
    download_url: URL
    rating: float
    edits: int
    external_rating: float
    uploader: str

    def label(self) -> str:
        return f"[{self.download_url} (rating: {self.rating})]"
