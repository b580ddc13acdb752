"""Access to downloaded subtitle archives."""

from __future__ import annotations

import io
import zipfile
import zlib

from subgrab.errors import MemberNotFoundError, NoExtensionError, SubgrabIOError

SIDECAR_EXTENSION = ".nfo"
PREFERRED_EXTENSION = ".srt"


class SubtitleArchive:
    """A zip archive held in memory."""

    def __init__(self, data: bytes):
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
            raise SubgrabIOError(f"reading zip: {exc}") from exc

    def list_members(self) -> list[str]:
        """Member names without ``.nfo`` sidecars, ``.srt`` files first."""
        names = [
            info.filename
            for info in self._zip.infolist()
            if not info.is_dir() and not info.filename.lower().endswith(SIDECAR_EXTENSION)
        ]
        preferred = [name for name in names if name.lower().endswith(PREFERRED_EXTENSION)]
        others = [name for name in names if not name.lower().endswith(PREFERRED_EXTENSION)]
        return preferred + others

    def extract_member(self, name: str) -> bytes:
        try:
            info = self._zip.getinfo(name)
        except KeyError as exc:
            raise MemberNotFoundError(f"{name} is not in the archive") from exc
        try:
            return self._zip.read(info)
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError, NotImplementedError) as exc:
            raise SubgrabIOError(f"reading {name}: {exc}") from exc

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "SubtitleArchive":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def member_extension(name: str) -> str:
    """Text after the last dot of the file name part of ``name``."""
    basename = name.rsplit("/", 1)[-1]
    extension = basename.rsplit(".", 1)[1] if "." in basename else ""
    if not extension:
        raise NoExtensionError(f"{name} has no extension")
    return extension
