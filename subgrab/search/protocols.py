"""Protocol definitions for the site client and interactive collaborators."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, TypeVar

from yarl import URL

_T = TypeVar("_T")


class PageFetcher(Protocol):
    """Minimal site access used by the pipeline."""

    async def get_page(self, url: URL) -> str:
        ...

    async def get_bytes(self, url: URL) -> bytes:
        ...


class PromptFn(Protocol):
    """Pick one of several labelled options, or return None on cancel."""

    def __call__(self, label: str, options: Sequence[tuple[str, _T]]) -> Optional[_T]:
        ...


class ConfirmFn(Protocol):
    """Yes/no question."""

    def __call__(self, label: str) -> bool:
        ...
