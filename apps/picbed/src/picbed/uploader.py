"""Upload workflow: validate, name, commit, link."""

import base64
import logging
from typing import Callable

from gh import GitHubClient, RemoteError

from .errors import UploadError, ValidationError
from .links import cdn_link, pages_link
from .models import RepositoryRef, UploadRequest, UploadResult, pages_repo_name
from .naming import build_stored_path, timestamp_millis

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 50 * 1024 * 1024
REPO_DESCRIPTION = "Image storage via picbed"


def validate_request(request: UploadRequest) -> None:
    """
    Reject malformed submissions before anything goes over the network.

    Raises:
        ValidationError: empty or oversized file, missing name, bad repo
    """
    if not request.data:
        raise ValidationError("Failed to read file content. The file may be empty or corrupted.")
    if not request.filename:
        raise ValidationError("No file selected.")
    if request.size_bytes > MAX_UPLOAD_BYTES:
        raise ValidationError("File too large. Maximum size is 50MB.")
    if request.target_repo and request.target_repo.strip():
        RepositoryRef.parse(request.target_repo)


class Uploader:
    """Turns an upload submission into a committed file and its public links."""

    def __init__(self, client: GitHubClient, clock: Callable[[], int] = timestamp_millis):
        """
        Args:
            client: GitHub client carrying the user's token
            clock: Millisecond timestamp source used for stored names
        """
        self.client = client
        self.clock = clock

    def upload(self, request: UploadRequest) -> UploadResult:
        """
        Commit one file.

        Raises:
            ValidationError: malformed submission (no remote call made)
            AuthError: token rejected
            UploadError: the commit was rejected
        """
        validate_request(request)

        username = self.client.get_user().login
        repo = RepositoryRef.resolve(request.target_repo, username)
        path = build_stored_path(request.path_prefix, request.filename, self.clock())
        logger.info(
            "Uploading %s (%.2f MB) to %s as %s",
            request.filename,
            request.size_bytes / 1024 / 1024,
            repo.full_name,
            path,
        )

        self.ensure_repository(repo)

        content = base64.b64encode(request.data).decode("ascii")
        try:
            self.client.put_file(repo.owner, repo.name, path, content)
        except RemoteError as e:
            logger.error("Upload of %s failed: %s", path, e)
            raise UploadError(e.status_code, e.raw_body) from e

        pages_exists = repo.is_pages_site and self.client.repository_exists(
            repo.owner, pages_repo_name(repo.owner)
        )
        result = UploadResult(
            cdn_link=cdn_link(repo, path, request.size_bytes),
            pages_link=pages_link(repo, path, pages_exists),
        )
        logger.info("Uploaded %s: %s", path, result.cdn_link)
        return result

    def ensure_repository(self, repo: RepositoryRef) -> None:
        """Create the repository if it is missing; failure is only logged.

        A repository that really is missing makes the commit fail anyway.
        """
        if self.client.repository_exists(repo.owner, repo.name):
            return
        try:
            self.client.create_repository(repo.name, REPO_DESCRIPTION)
        except RemoteError as e:
            logger.warning("Could not create %s: %s", repo.full_name, e)
