"""Remux a downloaded subtitle into the movie as a soft subtitle track."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import List

from subgrab import logger
from subgrab.errors import MuxFailedError

MUXED_SUFFIX = ".with-subs"

# Text subtitle codec each container can hold; anything else gets SubRip.
_CONTAINER_SUBTITLE_CODECS = {
    ".mp4": "mov_text",
    ".m4v": "mov_text",
    ".mov": "mov_text",
    ".webm": "webvtt",
}
_DEFAULT_SUBTITLE_CODEC = "srt"


def muxed_output_path(movie_file: Path) -> Path:
    """``movie.mkv`` -> ``movie.with-subs.mkv``"""
    return movie_file.with_suffix(f"{MUXED_SUFFIX}{movie_file.suffix}")


def subtitle_codec_for(container: Path) -> str:
    return _CONTAINER_SUBTITLE_CODECS.get(container.suffix.lower(), _DEFAULT_SUBTITLE_CODEC)


def count_subtitle_streams(movie_file: Path, ffprobe: str = "ffprobe") -> int:
    """Number of subtitle streams already present in ``movie_file``."""
    try:
        result = subprocess.run(
            [ffprobe, "-v", "quiet", "-print_format", "json",
             "-show_streams", str(movie_file)],
            capture_output=True, text=True, check=True,
        )
        data = json.loads(result.stdout)
    except (subprocess.CalledProcessError, FileNotFoundError, json.JSONDecodeError) as exc:
        raise MuxFailedError(f"probing streams of {movie_file}: {exc}") from exc
    return sum(1 for stream in data.get("streams", []) if stream.get("codec_type") == "subtitle")


def build_mux_command(
    movie_file: Path,
    subtitle_file: Path,
    language: str,
    output_file: Path,
    subtitle_index: int,
    ffmpeg: str = "ffmpeg",
) -> List[str]:
    """ffmpeg arguments copying every stream and adding the subtitle as the
    ``subtitle_index``-th subtitle stream of the output."""
    codec = subtitle_codec_for(output_file)
    return [
        ffmpeg, "-y", "-v", "error",
        "-i", str(movie_file),
        "-i", str(subtitle_file),
        "-map", "0", "-map", "1",
        "-c", "copy",
        f"-c:s:{subtitle_index}", codec,
        f"-metadata:s:s:{subtitle_index}", f"language={language}",
        str(output_file),
    ]


def mux_subtitle(
    movie_file: Path,
    subtitle_file: Path,
    language: str,
    ffmpeg: str = "ffmpeg",
    ffprobe: str = "ffprobe",
) -> Path:
    """Write ``movie.with-subs.<ext>`` and return its path."""
    output_file = muxed_output_path(movie_file)
    subtitle_index = count_subtitle_streams(movie_file, ffprobe)
    cmd = build_mux_command(movie_file, subtitle_file, language, output_file, subtitle_index, ffmpeg)
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        subprocess.run(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError as exc:
        raise MuxFailedError(f"{ffmpeg} not found") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        detail = f": {stderr.splitlines()[-1]}" if stderr else ""
        raise MuxFailedError(f"{ffmpeg} exited with status {exc.returncode}{detail}") from exc
    return output_file
