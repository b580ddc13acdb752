"""subgrab - fetch subtitles for a movie file by its OpenSubtitles hash."""

from .__version__ import __version__

__all__ = ["__version__"]
