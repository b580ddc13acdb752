#!/usr/bin/env python3
"""
cli.py - Entry point for subgrab
Find, download and unpack the best rated subtitle for a movie file.
"""

try:
    import asyncio
    import sys
    import argparse
    from pathlib import Path
    from rich.console import Console
    from rich.markup import escape
    from rich.prompt import Prompt
    from typing import Optional, Sequence, TypeVar
    import subgrab as pkg
    from .config import SubgrabConfig, load_config
    from .errors import SubgrabError
    from .logger import SubgrabLogger, set_logger
    from .pipeline import PipelineResult, run_pipeline
    from .search.site_client import SiteClient
except ImportError as e:
    print(f"Error: Missing required dependency: {e}")
    print("Please install required dependencies: pip install -e .")
    sys.exit(1)

console = Console()
_T = TypeVar("_T")
_CANCEL_CHOICES = {"q", "quit", "c", "cancel"}


def _ui_info(message: str) -> None:
    console.print(f"[cyan][INFO][/cyan] {message}")


def _ui_warn(message: str) -> None:
    console.print(f"[yellow][WARNING][/yellow] {message}")


def _ui_error(message: str) -> None:
    console.print(f"[red][ERROR][/red] {message}")


def _ui_prompt(label: str, default: str | None = None) -> str:
    if default is None:
        return Prompt.ask(label)
    return Prompt.ask(label, default=default)


def _ui_prompt_yesno(label: str, *, default_yes: bool = False) -> bool:
    suffix = "[Y/n]" if default_yes else "[y/N]"

    choice = _ui_prompt(f"{label} {suffix}", default="Y" if default_yes else "N").strip().lower()
    if not choice:
        return default_yes
    first = choice[0]
    if first == "y":
        return True
    if first == "n":
        return False
    return default_yes


def _ui_choose(label: str, options: Sequence[tuple[str, _T]]) -> Optional[_T]:
    """Numbered menu over ``options``; returns None when the user cancels."""
    console.print(f"\n{escape(label)}:")
    for idx, (text, _value) in enumerate(options, start=1):
        console.print(f"  [{idx}] {escape(text)}")
    console.print("  [Q] Cancel")

    while True:
        choice = _ui_prompt("Choice", default="1").strip().lower()
        if choice in _CANCEL_CHOICES:
            return None
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return options[int(choice) - 1][1]
        _ui_warn(f"Please enter a number between 1 and {len(options)}, or Q to cancel.")


def _confirm_mux(label: str) -> bool:
    return _ui_prompt_yesno(label, default_yes=False)


def _positive_int(value: str) -> int:
    """argparse type validator: integer >= 1."""
    ivalue = int(value)
    if ivalue < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return ivalue


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subgrab",
        description="Download the best rated OpenSubtitles subtitle for a movie file, matched by file hash.",
    )
    parser.add_argument("movie", nargs="?", type=Path, help="Movie file to find subtitles for")
    for args, kwargs in (
        (("-m", "--movie-file"), {"type": Path, "metavar": "PATH", "help": "Movie file (alternative to the positional argument)"}),
        (("-l", "--language"), {"metavar": "CODE", "help": "Subtitle language id, e.g. eng, pol (default: eng)"}),
        (("-n", "--top"), {"type": _positive_int, "metavar": "N", "help": "Offer the N best rated results (default: 1)"}),
        (("-c", "--config"), {"metavar": "PATH", "help": "Path to subgrab.toml"}),
        (("--log-file",), {"type": Path, "metavar": "PATH", "help": "Also write log output to this file"}),
        (("-d", "--debug"), {"action": "store_true", "help": "Debug mode with HTTP calls and pipeline steps"}),
        (("--version",), {"action": "version", "version": f"%(prog)s {pkg.__version__}"}),
    ):
        parser.add_argument(*args, **kwargs)
    return parser


async def _run(config: SubgrabConfig, movie_file: Path, language: str, top_n: int) -> PipelineResult:
    async with SiteClient(user_agent=config.user_agent) as client:
        return await run_pipeline(
            movie_file,
            language,
            top_n,
            client=client,
            prompt=_ui_choose,
            confirm=_confirm_mux,
            tools=config.tools,
        )


def main():
    """Entry point"""
    parser = build_parser()
    args = parser.parse_args()

    movie_file = args.movie_file or args.movie
    if movie_file is None:
        parser.error("a movie file is required")
    if args.movie_file and args.movie and args.movie_file != args.movie:
        parser.error("give the movie file either positionally or with --movie-file, not both")

    config = load_config(Path(args.config).expanduser() if args.config else None)
    language = args.language or config.language
    top_n = args.top or config.top
    log_file = args.log_file or config.log_file

    try:
        with SubgrabLogger(log_file=log_file, debug=args.debug or config.debug) as log:
            set_logger(log)
            log.info(f"Downloading '{language}' subtitles for {movie_file}")
            result = asyncio.run(_run(config, movie_file.expanduser(), language, top_n))
    except SubgrabError as e:
        _ui_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        _ui_error("Cancelled")
        sys.exit(1)
    except Exception as e:
        _ui_error(f"Fatal error: {e}")
        sys.exit(1)

    print(result.subtitle_file)
    if result.muxed_file is not None:
        print(result.muxed_file)


if __name__ == "__main__":
    main()
