"""Picbed data models."""

from gh import GitHubContent
from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError

PAGES_SUFFIX = ".github.io"


def pages_repo_name(owner: str) -> str:
    """Name of the repository GitHub Pages serves for an owner."""
    return f"{owner}{PAGES_SUFFIX}"


class RepositoryRef(BaseModel):
    """Target repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @classmethod
    def parse(cls, value: str) -> "RepositoryRef":
        """Parse an explicit "owner/name" string."""
        parts = value.strip().split("/")
        if len(parts) != 2 or not all(p.strip() and p.isprintable() for p in parts):
            raise ValidationError("Invalid repository format. Use owner/repo")
        return cls(owner=parts[0].strip(), name=parts[1].strip())

    @classmethod
    def resolve(cls, value: str | None, username: str) -> "RepositoryRef":
        """Explicit value wins; blank or missing means the user's Pages repo."""
        if value and value.strip():
            return cls.parse(value)
        return cls.pages(username)

    @classmethod
    def pages(cls, owner: str) -> "RepositoryRef":
        return cls(owner=owner, name=pages_repo_name(owner))

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def is_pages_site(self) -> bool:
        return self.name == pages_repo_name(self.owner)


class FileInfo(BaseModel):
    """One uploaded file, as seen in a directory listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    content_hash: str  # blob SHA, required to delete the file
    size_bytes: int
    download_url: str | None = None

    @classmethod
    def from_content(cls, item: GitHubContent) -> "FileInfo":
        return cls(
            name=item.name,
            path=item.path,
            content_hash=item.sha,
            size_bytes=item.size,
            download_url=item.download_url,
        )


class UploadRequest(BaseModel):
    """Upload submission: raw bytes plus where to put them."""

    target_repo: str | None = None
    path_prefix: str = ""
    filename: str = ""
    data: bytes = b""

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class DeleteRequest(BaseModel):
    """Delete submission."""

    repo: str
    path: str
    content_hash: str


class UploadResult(BaseModel):
    """Public links for a committed file."""

    cdn_link: str
    pages_link: str | None = None


class Dashboard(BaseModel):
    """Everything the dashboard view shows."""

    username: str
    repo: str
    uploaded_link: str | None = None
    pages_link: str | None = None
    error: str | None = None
    files: list[FileInfo] = Field(default_factory=list)
