"""Sequential fetch pipeline: hash the movie, find, download and write its subtitle.

Every state runs inside :func:`_step`, which tags a failure with the state and
a description of what was being done. A failure ends the run; nothing already
written is removed.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

from subgrab import logger
from subgrab.archive import SubtitleArchive, member_extension
from subgrab.config import ToolsConfig
from subgrab.errors import SubgrabError, SubgrabIOError
from subgrab.fingerprint import fingerprint
from subgrab.mux import mux_subtitle
from subgrab.search.parsers import parse_candidates, parse_download_url
from subgrab.search.protocols import ConfirmFn, PageFetcher, PromptFn
from subgrab.search.types import SearchCandidate
from subgrab.search.url_utils import search_url
from subgrab.selection import choose_candidate, choose_member


class PipelineState(str, Enum):
    FINGERPRINTING = "Fingerprinting"
    SEARCHING = "Searching"
    RANKING_RESULTS = "RankingResults"
    SELECTING_CANDIDATE = "SelectingCandidate"
    FETCHING_DETAIL_PAGE = "FetchingDetailPage"
    RESOLVING_DOWNLOAD = "ResolvingDownload"
    DOWNLOADING_ARCHIVE = "DownloadingArchive"
    LISTING_MEMBERS = "ListingMembers"
    SELECTING_MEMBER = "SelectingMember"
    EXTRACTING_MEMBER = "ExtractingMember"
    WRITING_OUTPUT = "WritingOutput"
    MUXING = "Muxing"
    DONE = "Done"


@dataclass
class PipelineResult:
    movie_hash: str
    candidate: SearchCandidate
    member_name: str
    subtitle_file: Path
    muxed_file: Optional[Path] = None


@contextmanager
def _step(state: PipelineState, description: str) -> Iterator[None]:
    logger.get_logger().step(state.value, description)
    try:
        yield
    except SubgrabError as exc:
        exc.with_context(state.value, description)
        raise
    except OSError as exc:
        raise SubgrabIOError(str(exc)).with_context(state.value, description) from exc


def subtitle_output_path(movie_file: Path, extension: str) -> Path:
    return movie_file.with_suffix(f".{extension}")


def write_subtitle(target: Path, data: bytes) -> None:
    """Write ``data`` to ``target`` through a temporary sibling and a rename."""
    tmp = target.with_name(target.name + f".tmp-{os.getpid()}")
    try:
        with open(tmp, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    os.replace(tmp, target)


async def run_pipeline(
    movie_file: Path,
    language: str,
    top_n: int,
    client: PageFetcher,
    prompt: PromptFn,
    confirm: ConfirmFn,
    tools: Optional[ToolsConfig] = None,
) -> PipelineResult:
    tools = tools or ToolsConfig()

    with _step(PipelineState.FINGERPRINTING, f"hashing {movie_file}"):
        movie_hash = fingerprint(movie_file)
    logger.info(f"Movie hash: {movie_hash}")

    with _step(PipelineState.SEARCHING, f"searching '{language}' subtitles for hash {movie_hash}"):
        page = await client.get_page(search_url(language, movie_hash))

    with _step(PipelineState.RANKING_RESULTS, "reading the search results"):
        candidates = parse_candidates(page, top_n)
    logger.info(f"Found {len(candidates)} candidate(s)")

    with _step(PipelineState.SELECTING_CANDIDATE, "choosing a subtitle"):
        candidate = choose_candidate(candidates, prompt)

    with _step(PipelineState.FETCHING_DETAIL_PAGE, f"fetching {candidate.download_url}"):
        detail_page = await client.get_page(candidate.download_url)

    with _step(PipelineState.RESOLVING_DOWNLOAD, "finding the download link"):
        download_url = parse_download_url(detail_page)

    with _step(PipelineState.DOWNLOADING_ARCHIVE, f"downloading {download_url}"):
        data = await client.get_bytes(download_url)

    with _step(PipelineState.LISTING_MEMBERS, "reading zip"):
        archive = SubtitleArchive(data)
        names = archive.list_members()
    logger.debug(f"Archive members: {', '.join(names)}")

    with archive:
        with _step(PipelineState.SELECTING_MEMBER, "choosing a subtitle file"):
            member_name = choose_member(names, prompt)
            target = subtitle_output_path(movie_file, member_extension(member_name))

        with _step(PipelineState.EXTRACTING_MEMBER, f"extracting {member_name} from the archive"):
            subtitle_data = archive.extract_member(member_name)

    with _step(PipelineState.WRITING_OUTPUT, f"writing subtitle file to {target}"):
        write_subtitle(target, subtitle_data)
    logger.info(f"Wrote subtitle to {target}")

    result = PipelineResult(
        movie_hash=movie_hash,
        candidate=candidate,
        member_name=member_name,
        subtitle_file=target,
    )

    if confirm("Mux the subtitle into a new copy of the movie?"):
        with _step(PipelineState.MUXING, f"muxing {target} into {movie_file}"):
            result.muxed_file = mux_subtitle(
                movie_file, target, language, ffmpeg=tools.ffmpeg, ffprobe=tools.ffprobe
            )
        logger.info(f"Wrote muxed movie to {result.muxed_file}")

    logger.get_logger().step(PipelineState.DONE.value, "finished")
    return result
