"""Stored file naming: millisecond timestamp injected before the extension."""

import time


def timestamp_millis() -> int:
    """Current Unix time in milliseconds."""
    return time.time_ns() // 1_000_000


def stamp_filename(filename: str, timestamp: int) -> str:
    """
    Insert `_<timestamp>` before the last dot of a filename.

    >>> stamp_filename("photo.png", 1700000000000)
    'photo_1700000000000.png'
    >>> stamp_filename("readme", 1700000000000)
    'readme_1700000000000'
    """
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        return f"{filename}_{timestamp}"
    return f"{stem}_{timestamp}.{ext}"


def build_stored_path(path_prefix: str, filename: str, timestamp: int) -> str:
    """Repository path for an upload; an empty prefix means the repo root."""
    name = stamp_filename(filename, timestamp)
    prefix = path_prefix.strip().strip("/")
    if not prefix:
        return name
    return f"{prefix}/{name}"
