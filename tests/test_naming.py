"""
Tests for stored names and public links.
"""
import pytest

from picbed.links import CDN_SIZE_LIMIT, cdn_link, pages_link
from picbed.models import RepositoryRef
from picbed.naming import build_stored_path, stamp_filename, timestamp_millis

TS = 1700000000000


class TestStampFilename:
    """Timestamp injection."""

    def test_with_extension(self):
        assert stamp_filename("photo.png", TS) == "photo_1700000000000.png"

    def test_without_extension(self):
        assert stamp_filename("readme", TS) == "readme_1700000000000"

    def test_uses_last_dot(self):
        assert stamp_filename("archive.tar.gz", TS) == "archive.tar_1700000000000.gz"

    def test_different_millis_never_collide(self):
        assert stamp_filename("photo.png", TS) != stamp_filename("photo.png", TS + 1)

    def test_clock_is_milliseconds(self):
        assert len(str(timestamp_millis())) == 13


class TestStoredPath:
    """Prefix handling."""

    @pytest.mark.parametrize("prefix", ["", "/", "  "])
    def test_empty_prefix(self, prefix):
        assert build_stored_path(prefix, "a.png", TS) == "a_1700000000000.png"

    @pytest.mark.parametrize("prefix", ["img", "img/", "/img/"])
    def test_prefix_slashes_trimmed(self, prefix):
        assert build_stored_path(prefix, "a.png", TS) == "img/a_1700000000000.png"

    def test_nested_prefix(self):
        assert build_stored_path("2024/05", "a.png", TS) == "2024/05/a_1700000000000.png"


class TestCdnLink:
    """Size-based link choice."""

    repo = RepositoryRef(owner="octocat", name="images")

    def test_at_limit_uses_cdn(self):
        link = cdn_link(self.repo, "a.png", 20 * 1024 * 1024)
        assert link == "https://cdn.jsdelivr.net/gh/octocat/images/a.png"

    def test_over_limit_uses_raw(self):
        link = cdn_link(self.repo, "a.png", CDN_SIZE_LIMIT + 1)
        assert link == "https://raw.githubusercontent.com/octocat/images/main/a.png"

    def test_path_is_quoted(self):
        link = cdn_link(self.repo, "img/my cat#2.png", 10)
        assert link == "https://cdn.jsdelivr.net/gh/octocat/images/img/my%20cat%232.png"

    def test_raw_path_is_quoted(self):
        link = cdn_link(self.repo, "img/a?b.png", CDN_SIZE_LIMIT + 1)
        assert link == "https://raw.githubusercontent.com/octocat/images/main/img/a%3Fb.png"


class TestPagesLink:
    """Pages links only for an existing <owner>.github.io repo."""

    def test_pages_repo(self):
        repo = RepositoryRef.pages("octocat")
        assert pages_link(repo, "img/a.png", True) == "https://octocat.github.io/img/a.png"

    def test_pages_path_is_quoted(self):
        repo = RepositoryRef.pages("octocat")
        assert pages_link(repo, "my cat.png", True) == "https://octocat.github.io/my%20cat.png"

    def test_pages_repo_missing(self):
        assert pages_link(RepositoryRef.pages("octocat"), "a.png", False) is None

    def test_other_repo(self):
        assert pages_link(RepositoryRef(owner="octocat", name="images"), "a.png", True) is None

    def test_someone_elses_pages_repo(self):
        repo = RepositoryRef(owner="octocat", name="hubot.github.io")
        assert pages_link(repo, "a.png", True) is None
