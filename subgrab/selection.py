"""Choosing one option out of several, with the prompt injected by the caller."""

from __future__ import annotations

from typing import Sequence, TypeVar

from subgrab.errors import SelectionAbortedError
from subgrab.search.protocols import PromptFn
from subgrab.search.types import SearchCandidate

_T = TypeVar("_T")


def choose(label: str, options: Sequence[tuple[str, _T]], prompt: PromptFn) -> _T:
    """Return the single option directly, otherwise ask ``prompt``."""
    if not options:
        raise SelectionAbortedError(f"nothing to choose for '{label}'")
    if len(options) == 1:
        return options[0][1]
    chosen = prompt(label, options)
    if chosen is None:
        raise SelectionAbortedError(f"no choice made for '{label}'")
    return chosen


def choose_candidate(candidates: Sequence[SearchCandidate], prompt: PromptFn) -> SearchCandidate:
    return choose(
        "Select the subtitle",
        [(candidate.label(), candidate) for candidate in candidates],
        prompt,
    )


def choose_member(names: Sequence[str], prompt: PromptFn) -> str:
    return choose("Select the subtitle file", [(name, name) for name in names], prompt)
