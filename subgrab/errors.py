"""Error taxonomy for the subtitle fetch pipeline."""

from __future__ import annotations


class SubgrabError(Exception):
    """Base class for pipeline failures.

    ``state`` and ``context`` are attached by the pipeline step that was
    running when the error surfaced, so the final message names the step.
    """

    state: str | None = None
    context: str | None = None

    def with_context(self, state: str, context: str) -> "SubgrabError":
        if self.context is None:
            self.state = state
            self.context = context
        return self

    def __str__(self) -> str:
        message = super().__str__()
        if self.context:
            return f"{self.context}: {message}" if message else self.context
        return message


class InputTooSmallError(SubgrabError):
    """Movie file cannot supply two non-overlapping 64 KiB hash windows."""


class SubgrabIOError(SubgrabError, OSError):
    """File or archive read, seek or write failure."""


class InvalidUrlError(SubgrabError, ValueError):
    """A constructed or resolved link is not a usable absolute URL."""


class NetworkError(SubgrabError):
    """Request or transport failure, including HTTP error statuses."""


class NoResultsTableError(SubgrabError):
    """The search page has no results table."""


class RowParseError(SubgrabError):
    """A single results row could not be parsed. Never escapes the parser."""


class NoDownloadLinkError(SubgrabError):
    """The detail page carries no download link."""


class SelectionAbortedError(SubgrabError):
    """The interactive prompt returned no choice."""


class MemberNotFoundError(SubgrabError):
    """Requested archive member is not present."""


class NoExtensionError(SubgrabError):
    """Archive member name has no extension to derive the output suffix from."""


class MuxFailedError(SubgrabError):
    """The external remux tool failed or could not be started."""
