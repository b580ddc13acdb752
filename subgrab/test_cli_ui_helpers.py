from __future__ import annotations

import argparse
from pathlib import Path

import pytest

import subgrab.cli as cli
from subgrab.config import SubgrabConfig
from subgrab.errors import NetworkError
from subgrab.pipeline import PipelineResult


@pytest.fixture
def lines(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    captured: list[str] = []
    monkeypatch.setattr(cli.console, "print", lambda msg, *_args, **_kwargs: captured.append(str(msg)))
    return captured


def _answers(monkeypatch: pytest.MonkeyPatch, *answers: str) -> list[tuple[str, str | None]]:
    queue = list(answers)
    calls: list[tuple[str, str | None]] = []

    def _fake_ask(label: str, default: str | None = None) -> str:
        calls.append((label, default))
        return queue.pop(0)

    monkeypatch.setattr(cli.Prompt, "ask", _fake_ask)
    return calls


def test_ui_info_warn_error_emit_prefixed_messages(lines: list[str]) -> None:
    cli._ui_info("hello")
    cli._ui_warn("careful")
    cli._ui_error("boom")

    assert lines == [
        "[cyan][INFO][/cyan] hello",
        "[yellow][WARNING][/yellow] careful",
        "[red][ERROR][/red] boom",
    ]


def test_ui_prompt_with_and_without_default(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _answers(monkeypatch, "answer", "answer")

    assert cli._ui_prompt("Label") == "answer"
    assert cli._ui_prompt("Label2", default="X") == "answer"
    assert calls == [("Label", None), ("Label2", "X")]


@pytest.mark.parametrize(
    ("answer", "default_yes", "expected"),
    [("y", False, True), ("No", True, False), ("", True, True), ("maybe", False, False)],
)
def test_ui_prompt_yesno(monkeypatch: pytest.MonkeyPatch, answer: str, default_yes: bool, expected: bool) -> None:
    calls = _answers(monkeypatch, answer)

    assert cli._ui_prompt_yesno("Mux?", default_yes=default_yes) is expected
    assert calls[0][0] == ("Mux? [Y/n]" if default_yes else "Mux? [y/N]")


def test_ui_choose_returns_selected_value(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    _answers(monkeypatch, "2")

    chosen = cli._ui_choose("Select the subtitle", [("[a (rating: 9.0)]", "a"), ("[b (rating: 8.0)]", "b")])

    assert chosen == "b"
    assert lines[0] == "\nSelect the subtitle:"
    assert "\\[a (rating: 9.0)]" in lines[1]
    assert lines[-1] == "  [Q] Cancel"


def test_ui_choose_cancel_returns_none(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    _answers(monkeypatch, "Q")

    assert cli._ui_choose("Select the subtitle file", [("a.srt", "a.srt"), ("b.srt", "b.srt")]) is None


def test_ui_choose_asks_again_on_invalid_input(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    calls = _answers(monkeypatch, "7", "zero", "1")

    assert cli._ui_choose("Select the subtitle file", [("a.srt", "a.srt"), ("b.srt", "b.srt")]) == "a.srt"
    assert len(calls) == 3
    assert sum("between 1 and 2" in line for line in lines) == 2


def test_positive_int() -> None:
    assert cli._positive_int("3") == 3
    with pytest.raises(argparse.ArgumentTypeError):
        cli._positive_int("0")
    with pytest.raises(ValueError):
        cli._positive_int("three")


def test_parser_accepts_both_movie_forms() -> None:
    parser = cli.build_parser()

    positional = parser.parse_args(["movie.mkv", "-n", "3"])
    flagged = parser.parse_args(["--movie-file", "movie.mkv", "-l", "pol", "-d"])

    assert positional.movie == Path("movie.mkv")
    assert positional.top == 3
    assert positional.language is None
    assert flagged.movie_file == Path("movie.mkv")
    assert flagged.language == "pol"
    assert flagged.debug is True


def _main(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(cli.sys, "argv", ["subgrab", *argv])
    monkeypatch.setattr(cli, "load_config", lambda _path: SubgrabConfig(language="pol", top=2))
    cli.main()


def test_main_rejects_conflicting_movie_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _main(monkeypatch, "a.mkv", "--movie-file", "b.mkv")

    assert exc_info.value.code == 2


def test_main_falls_back_to_config_and_prints_result(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    lines: list[str],
) -> None:
    seen: list[tuple] = []

    async def _fake_run(config, movie_file, language, top_n):
        seen.append((movie_file, language, top_n))
        return PipelineResult(
            movie_hash="0000000000020000",
            candidate=None,
            member_name="movie.srt",
            subtitle_file=Path("movie.srt"),
        )

    monkeypatch.setattr(cli, "_run", _fake_run)

    _main(monkeypatch, "movie.mkv", "-n", "5")

    assert seen == [(Path("movie.mkv"), "pol", 5)]
    assert capsys.readouterr().out.splitlines()[-1] == "movie.srt"


def test_main_reports_pipeline_errors(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    async def _failing_run(*_args):
        raise NetworkError("GET x returned 503").with_context("Searching", "searching 'pol' subtitles")

    monkeypatch.setattr(cli, "_run", _failing_run)

    with pytest.raises(SystemExit) as exc_info:
        _main(monkeypatch, "movie.mkv")

    assert exc_info.value.code == 1
    assert lines[-1] == "[red][ERROR][/red] searching 'pol' subtitles: GET x returned 503"
