"""GitHub API data models."""

from typing import Literal

from pydantic import BaseModel


class GitHubUser(BaseModel):
    """Authenticated user."""

    login: str
    id: int | None = None
    name: str | None = None


class GitHubContent(BaseModel):
    """GitHub content item (file or directory)."""

    name: str
    path: str
    sha: str
    size: int = 0
    type: Literal["file", "dir", "symlink", "submodule"] = "file"
    url: str | None = None
    html_url: str | None = None
    download_url: str | None = None


class GitHubCommit(BaseModel):
    """Commit created by a contents write."""

    sha: str
    html_url: str | None = None
