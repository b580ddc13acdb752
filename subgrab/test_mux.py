from __future__ import annotations

import json
import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from subgrab import mux
from subgrab.errors import MuxFailedError


def _ffprobe_output(*codec_types: str) -> str:
    return json.dumps({"streams": [{"index": i, "codec_type": t} for i, t in enumerate(codec_types)]})


class _FakeRun:
    def __init__(self, ffprobe_stdout: str, ffmpeg_returncode: int = 0, ffmpeg_stderr: str = "") -> None:
        self.ffprobe_stdout = ffprobe_stdout
        self.ffmpeg_returncode = ffmpeg_returncode
        self.ffmpeg_stderr = ffmpeg_stderr
        self.calls: list[list[str]] = []

    def __call__(self, cmd, capture_output=False, text=False, check=False):
        self.calls.append(list(cmd))
        if "ffprobe" in cmd[0]:
            return SimpleNamespace(returncode=0, stdout=self.ffprobe_stdout, stderr="")
        if check and self.ffmpeg_returncode != 0:
            raise subprocess.CalledProcessError(
                self.ffmpeg_returncode, cmd, output="", stderr=self.ffmpeg_stderr
            )
        return SimpleNamespace(returncode=self.ffmpeg_returncode, stdout="", stderr="")


def test_muxed_output_path() -> None:
    assert mux.muxed_output_path(Path("/m/Movie.2001.mkv")) == Path("/m/Movie.2001.with-subs.mkv")


@pytest.mark.parametrize(
    ("name", "codec"),
    [("a.mp4", "mov_text"), ("a.MOV", "mov_text"), ("a.webm", "webvtt"), ("a.mkv", "srt"), ("a.avi", "srt")],
)
def test_subtitle_codec_for_container(name: str, codec: str) -> None:
    assert mux.subtitle_codec_for(Path(name)) == codec


def test_mux_adds_subtitle_after_existing_tracks(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeRun(_ffprobe_output("video", "audio", "subtitle", "subtitle"))
    monkeypatch.setattr(mux.subprocess, "run", fake)

    output = mux.mux_subtitle(Path("/m/movie.mkv"), Path("/m/movie.srt"), "pol")

    assert output == Path("/m/movie.with-subs.mkv")
    assert fake.calls[1] == [
        "ffmpeg", "-y", "-v", "error",
        "-i", "/m/movie.mkv",
        "-i", "/m/movie.srt",
        "-map", "0", "-map", "1",
        "-c", "copy",
        "-c:s:2", "srt",
        "-metadata:s:s:2", "language=pol",
        "/m/movie.with-subs.mkv",
    ]


def test_mux_uses_configured_binaries(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeRun(_ffprobe_output("video"))
    monkeypatch.setattr(mux.subprocess, "run", fake)

    mux.mux_subtitle(Path("m.mp4"), Path("m.srt"), "eng", ffmpeg="/opt/ffmpeg", ffprobe="/opt/ffprobe")

    assert fake.calls[0][0] == "/opt/ffprobe"
    assert fake.calls[1][0] == "/opt/ffmpeg"
    assert fake.calls[1][fake.calls[1].index("-c:s:0") + 1] == "mov_text"


def test_non_zero_exit_is_mux_failed(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeRun(_ffprobe_output("video"), ffmpeg_returncode=1, ffmpeg_stderr="warning\nInvalid data found")
    monkeypatch.setattr(mux.subprocess, "run", fake)

    with pytest.raises(MuxFailedError) as exc_info:
        mux.mux_subtitle(Path("m.mkv"), Path("m.srt"), "eng")

    assert "status 1" in str(exc_info.value)
    assert "Invalid data found" in str(exc_info.value)


def test_missing_ffprobe_is_mux_failed(monkeypatch: pytest.MonkeyPatch) -> None:
    def _missing(*_args, **_kwargs):
        raise FileNotFoundError("ffprobe")

    monkeypatch.setattr(mux.subprocess, "run", _missing)

    with pytest.raises(MuxFailedError):
        mux.count_subtitle_streams(Path("m.mkv"))
