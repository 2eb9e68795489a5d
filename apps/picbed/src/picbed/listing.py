"""Listing of uploaded files, newest first."""

import logging
import re
from functools import cmp_to_key

from gh import GitHubClient

from .models import FileInfo

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100

_DIGITS = re.compile(r"[0-9]+")
_MAX_TIMESTAMP = 2**128 - 1


def extract_timestamp(name: str) -> int:
    """
    Timestamp embedded as `stem_<digits>.ext`, or 0 if there is none.

    The digits sit between the last `_` and the last `.` of the name.
    """
    stem, dot, _ = name.rpartition(".")
    if not dot:
        return 0
    _, underscore, digits = stem.rpartition("_")
    if not underscore or not _DIGITS.fullmatch(digits):
        return 0
    value = int(digits)
    return value if value <= _MAX_TIMESTAMP else 0


def compare_files(a: FileInfo, b: FileInfo) -> int:
    """
    Timestamp descending when both names carry one, else name ascending.

    Not a total order over mixed sets: files named before timestamps were
    added only compare by name.
    """
    ts_a = extract_timestamp(a.name)
    ts_b = extract_timestamp(b.name)
    if ts_a and ts_b:
        return (ts_b > ts_a) - (ts_b < ts_a)
    return (a.name > b.name) - (a.name < b.name)


def sort_newest_first(files: list[FileInfo]) -> list[FileInfo]:
    return sorted(files, key=cmp_to_key(compare_files))


class ListingService:
    """Reads a directory and orders it for display."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def list(
        self, owner: str, repo: str, path: str = "", limit: int = DEFAULT_LIMIT
    ) -> list[FileInfo]:
        """
        List files in a repository directory, newest first.

        A failed listing is indistinguishable from an empty directory.
        """
        contents = self.client.list_directory(owner, repo, path)
        files = sort_newest_first([FileInfo.from_content(item) for item in contents])
        logger.debug("Listed %d files in %s/%s path=%s", len(files), owner, repo, path)
        return files[:limit]
