"""Parsers for the search results page and the subtitle detail page.

The selector contract is fixed by the site's markup:

* search page: ``table#search_results``; the first row is the header, every
  other row carries nine ``td`` cells (name, flag, cd, sent, download link,
  rating, edits, external rating, uploader).
* detail page: the first ``#bt-dwl-bt`` element holds the archive link.
"""

from __future__ import annotations

import math

from bs4 import BeautifulSoup, Tag
from yarl import URL

from subgrab import logger
from subgrab.errors import (
    InvalidUrlError,
    NoDownloadLinkError,
    NoResultsTableError,
    RowParseError,
)
from subgrab.search.types import SearchCandidate
from subgrab.search.url_utils import resolve_link

RESULTS_TABLE_SELECTOR = "table#search_results"
DOWNLOAD_LINK_SELECTOR = "#bt-dwl-bt"
ROW_CELL_COUNT = 9


def _cell_text(cell: Tag) -> str:
    return cell.get_text().strip()


def _as_float(cell: Tag, field: str) -> float:
    text = _cell_text(cell)
    try:
        value = float(text)
    except ValueError as exc:
        raise RowParseError(f"{field} {text!r} is not a number") from exc
    if not math.isfinite(value):
        raise RowParseError(f"{field} {text!r} is not a finite number")
    return value


def _as_int(cell: Tag, field: str) -> int:
    text = _cell_text(cell)
    try:
        return int(text)
    except ValueError as exc:
        raise RowParseError(f"{field} {text!r} is not an integer") from exc


def _link(cell: Tag) -> URL:
    anchor = cell.select_one("a[href]")
    if anchor is None:
        raise RowParseError("download cell has no link")
    try:
        return resolve_link(str(anchor["href"]))
    except InvalidUrlError as exc:
        raise RowParseError(str(exc)) from exc


def _is_hidden(row: Tag) -> bool:
    style = "".join(str(row.get("style") or "").split()).lower()
    return "display:none" in style


def _is_separator(row: Tag) -> bool:
    if "head" in (row.get("class") or []) or _is_hidden(row):
        return True
    return not row.find_all("td", recursive=False)


def parse_row(row: Tag) -> SearchCandidate:
    cells = row.find_all("td", recursive=False)
    if len(cells) != ROW_CELL_COUNT:
        raise RowParseError(f"expected {ROW_CELL_COUNT} cells, found {len(cells)}")
    return SearchCandidate(
        name=_cell_text(cells[0]),
        flag=_cell_text(cells[1]),
        cd=_cell_text(cells[2]),
        sent=_cell_text(cells[3]),
        download_url=_link(cells[4]),
        rating=_as_float(cells[5], "rating"),
        edits=_as_int(cells[6], "edit count"),
        external_rating=_as_float(cells[7], "external rating"),
        uploader=_cell_text(cells[8]),
    )


def parse_candidates(page: str, top_n: int) -> list[SearchCandidate]:
    """Return the ``top_n`` best rated rows of the results table.

    Malformed rows are logged and dropped. Ties keep document order.
    """
    if top_n < 1:
        raise ValueError("top_n must be at least 1")

    soup = BeautifulSoup(page, "html.parser")
    table = soup.select_one(RESULTS_TABLE_SELECTOR)
    if table is None:
        raise NoResultsTableError("no results table on the search page")

    rows = [row for row in table.select("tr") if row.find_parent("table") is table]
    candidates: list[SearchCandidate] = []
    for index, row in enumerate(rows[1:], start=1):
        if _is_separator(row):
            continue
        try:
            candidates.append(parse_row(row))
        except RowParseError as exc:
            logger.warning(f"Skipping results row {index}: {exc}")

    logger.debug(f"Parsed {len(candidates)} candidate(s) from {len(rows) - 1} row(s)")
    ranked = sorted(candidates, key=lambda candidate: candidate.rating, reverse=True)
    return ranked[:top_n]


def parse_download_url(detail_page: str) -> URL:
    soup = BeautifulSoup(detail_page, "html.parser")
    element = soup.select_one(DOWNLOAD_LINK_SELECTOR)
    if element is None:
        raise NoDownloadLinkError("no download element on the detail page")
    href = element.get("href")
    if not href:
        raise NoDownloadLinkError("download element has no link")
    return resolve_link(str(href))
