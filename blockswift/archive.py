"""Zip packaging for generated project file trees."""

from __future__ import annotations

import io
import zipfile
import zlib
from typing import List, Mapping

from .errors import ArchiveError

# Earliest timestamp the zip format can store; keeps archives reproducible.
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o644


def _entry(path: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(path, date_time=FIXED_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = (FILE_MODE & 0xFFFF) << 16
    return info


def build_archive(files: Mapping[str, str]) -> bytes:
    """Serialise ``files`` into DEFLATE-compressed zip bytes.

    The archive is assembled entirely in memory and only returned once it is
    complete; any failure raises :class:`ArchiveError`.
    """

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path, content in files.items():
                archive.writestr(_entry(path), content.encode("utf-8"))
    except (zipfile.LargeZipFile, zlib.error, MemoryError, ValueError, OSError) as exc:
        raise ArchiveError(f"Could not build the project archive: {exc}") from exc
    return buffer.getvalue()


def list_entries(archive: bytes) -> List[str]:
    """Names of every entry in an archive, in stored order."""

    try:
        with zipfile.ZipFile(io.BytesIO(archive)) as reader:
            return reader.namelist()
    except zipfile.BadZipFile as exc:
        raise ArchiveError(f"Not a valid project archive: {exc}") from exc


def read_entry(archive: bytes, path: str) -> str:
    try:
        with zipfile.ZipFile(io.BytesIO(archive)) as reader:
            return reader.read(path).decode("utf-8")
    except (zipfile.BadZipFile, KeyError) as exc:
        raise ArchiveError(f"Could not read {path} from the archive: {exc}") from exc
