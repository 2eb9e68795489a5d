"""Public link construction."""

from urllib.parse import quote

from .models import RepositoryRef

CDN_BASE_URL = "https://cdn.jsdelivr.net/gh"
RAW_BASE_URL = "https://raw.githubusercontent.com"
RAW_BRANCH = "main"

# jsDelivr refuses to serve files above this size.
CDN_SIZE_LIMIT = 20 * 1024 * 1024


def _url_path(path: str) -> str:
    return quote(path, safe="/")


def cdn_link(repo: RepositoryRef, path: str, size_bytes: int) -> str:
    """jsDelivr URL for files up to 20 MiB, raw.githubusercontent.com above that."""
    if size_bytes <= CDN_SIZE_LIMIT:
        return f"{CDN_BASE_URL}/{repo.owner}/{repo.name}/{_url_path(path)}"
    return f"{RAW_BASE_URL}/{repo.owner}/{repo.name}/{RAW_BRANCH}/{_url_path(path)}"


def pages_site_url(owner: str) -> str:
    return f"https://{owner}.github.io"


def pages_link(repo: RepositoryRef, path: str, pages_repo_exists: bool) -> str | None:
    """Direct Pages URL, only for an existing `{owner}.github.io` repository."""
    if not (repo.is_pages_site and pages_repo_exists):
        return None
    return f"{pages_site_url(repo.owner)}/{_url_path(path)}"
