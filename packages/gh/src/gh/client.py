"""GitHub API client."""

import logging
import os
import subprocess
from typing import Any
from urllib.parse import quote

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from .errors import AuthError, RemoteError
from .models import GitHubCommit, GitHubContent, GitHubUser

logger = logging.getLogger(__name__)

# Retry configuration. One attempt means transport failures surface immediately.
DEFAULT_MAX_RETRIES = 1
DEFAULT_MIN_WAIT = 1  # seconds
DEFAULT_MAX_WAIT = 10  # seconds

USER_AGENT = "picbed"

# Retryable exceptions
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
    httpx.PoolTimeout,
    httpx.NetworkError,
)

# Everything a request can raise before or instead of a response.
# InvalidURL is not an HTTPError subclass.
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def get_token_from_gh_cli() -> str | None:
    """
    Get GitHub token from gh cli.

    Returns:
        Token string or None if gh cli not available/authenticated
    """
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            logger.info("Using token from gh cli")
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("gh cli not available: %s", e)
    return None


def get_token(token: str | None = None, use_gh_cli: bool = False) -> str | None:
    """
    Get GitHub token from various sources.

    Priority:
    1. Explicitly provided token
    2. Environment variable GH_TOKEN / GITHUB_TOKEN
    3. gh cli (`gh auth token`) - only if use_gh_cli=True

    Args:
        token: Explicitly provided token
        use_gh_cli: Whether to use gh cli credentials (requires user consent)

    Returns:
        GitHub token or None
    """
    if token:
        logger.debug("Using explicitly provided token")
        return token

    env_token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if env_token:
        logger.info("Using token from environment variable")
        return env_token

    if use_gh_cli:
        return get_token_from_gh_cli()

    return None


def create_retry_decorator(max_retries: int = DEFAULT_MAX_RETRIES):
    """Create a retry decorator with specified max attempts."""
    return retry(
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        stop=stop_after_attempt(max(1, max_retries)),
        wait=wait_exponential(multiplier=1, min=DEFAULT_MIN_WAIT, max=DEFAULT_MAX_WAIT),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def _is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


class GitHubClient:
    """GitHub REST API client bound to a single bearer token.

    Holds no per-request state, so one instance may be shared across threads.
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = DEFAULT_MAX_RETRIES,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: Opaque bearer token (never inspected)
            base_url: Custom base URL (defaults to GitHub API)
            timeout: Request timeout in seconds
            max_retries: Attempts for transport failures (default: 1, no retry)
            transport: Optional httpx transport, e.g. a mock in tests
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.transport = transport
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
            "Authorization": f"Bearer {token}",
        }
        logger.debug("GitHub client ready, base_url=%s, max_retries=%d", self.base_url, max_retries)

    def _request(
        self, method: str, endpoint: str, **kwargs: Any
    ) -> httpx.Response:
        """Make HTTP request to GitHub API, retrying transport failures only.

        Status codes are returned as-is; callers decide what they mean.
        """
        url = f"{self.base_url}{endpoint}"

        @create_retry_decorator(self.max_retries)
        def do_request() -> httpx.Response:
            logger.debug("Request: %s %s", method, url)
            with httpx.Client(
                timeout=self.timeout, headers=self.headers, transport=self.transport
            ) as client:
                response = client.request(method, url, **kwargs)
                logger.debug(
                    "Response: %s %s (status=%d)",
                    method,
                    endpoint,
                    response.status_code,
                )
                return response

        return do_request()

    @staticmethod
    def _contents_endpoint(owner: str, repo: str, path: str) -> str:
        return f"/repos/{owner}/{repo}/contents/{quote(path.strip('/'), safe='/')}"

    def get_user(self) -> GitHubUser:
        """
        Look up the user that owns the token.

        Returns:
            GitHubUser for the token

        Raises:
            AuthError: on any non-2xx or transport failure
        """
        try:
            response = self._request("GET", "/user")
        except REQUEST_ERRORS as e:
            logger.warning("Identity check failed: %s", e)
            raise AuthError(f"Could not verify token: {e}") from e

        if not _is_success(response):
            logger.warning("Identity check rejected (status=%d)", response.status_code)
            raise AuthError("Invalid GitHub token")

        try:
            user = GitHubUser(**response.json())
        except (ValueError, TypeError) as e:
            raise AuthError("Unexpected identity response") from e
        logger.info("Authenticated as %s", user.login)
        return user

    def repository_exists(self, owner: str, repo: str) -> bool:
        """Return True only if the repository is visible to the token."""
        try:
            response = self._request("GET", f"/repos/{owner}/{repo}")
        except REQUEST_ERRORS as e:
            logger.warning("Repository check failed for %s/%s: %s", owner, repo, e)
            return False
        exists = _is_success(response)
        logger.debug("Repository %s/%s exists=%s", owner, repo, exists)
        return exists

    def create_repository(self, name: str, description: str = "") -> None:
        """
        Create a repository for the authenticated user.

        The repository is auto-initialised so contents can be written to it
        straight away.

        Raises:
            RemoteError: if GitHub rejects the request
        """
        logger.info("Creating repository: %s", name)
        body = {"name": name, "description": description, "auto_init": True}
        try:
            response = self._request("POST", "/user/repos", json=body)
        except REQUEST_ERRORS as e:
            raise RemoteError(None, str(e)) from e
        if not _is_success(response):
            logger.error("Repository creation failed (status=%d)", response.status_code)
            raise RemoteError(response.status_code, response.text)

    def list_directory(self, owner: str, repo: str, path: str = "") -> list[GitHubContent]:
        """
        List a directory.

        An empty directory and a failed request look the same: both give [].
        """
        endpoint = self._contents_endpoint(owner, repo, path)
        logger.info("Listing contents: %s/%s path=%s", owner, repo, path)
        try:
            response = self._request("GET", endpoint)
        except REQUEST_ERRORS as e:
            logger.warning("Listing failed for %s/%s: %s", owner, repo, e)
            return []

        if not _is_success(response):
            logger.debug("Listing returned status=%d, treating as empty", response.status_code)
            return []

        try:
            data = response.json()
        except ValueError:
            logger.warning("Listing for %s/%s returned a non-JSON body", owner, repo)
            return []

        # A file path returns a single object instead of a list
        if not isinstance(data, list):
            logger.debug("Path %s is not a directory", path)
            return []

        logger.debug("Directory listing: %d items", len(data))
        try:
            return [GitHubContent(**item) for item in data]
        except (ValueError, TypeError) as e:
            logger.warning("Unexpected listing entry in %s/%s: %s", owner, repo, e)
            return []

    def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content_base64: str,
        message: str | None = None,
    ) -> str:
        """
        Create or overwrite a file with a single commit.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in repository
            content_base64: Base64 encoded file content
            message: Commit message (default: "Upload {path} via picbed")

        Returns:
            SHA of the new commit

        Raises:
            RemoteError: if GitHub rejects the write
        """
        endpoint = self._contents_endpoint(owner, repo, path)
        body = {
            "message": message or f"Upload {path} via {USER_AGENT}",
            "content": content_base64,
        }
        logger.info("Committing %s to %s/%s", path, owner, repo)
        try:
            response = self._request("PUT", endpoint, json=body)
        except REQUEST_ERRORS as e:
            raise RemoteError(None, str(e)) from e

        if not _is_success(response):
            logger.error("Commit of %s failed (status=%d)", path, response.status_code)
            raise RemoteError(response.status_code, response.text)

        try:
            commit = GitHubCommit(**response.json().get("commit", {}))
        except (ValueError, TypeError, AttributeError):
            logger.debug("Commit response for %s had no commit record", path)
            return ""
        logger.debug("Committed %s as %s", path, commit.sha)
        return commit.sha

    def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        sha: str,
        message: str | None = None,
    ) -> None:
        """
        Delete a file.

        Args:
            sha: Blob SHA of the file's current content, from a listing.
                GitHub refuses the delete if it is stale.

        Raises:
            RemoteError: if GitHub rejects the delete
        """
        endpoint = self._contents_endpoint(owner, repo, path)
        body = {
            "message": message or f"Delete {path} via {USER_AGENT}",
            "sha": sha,
        }
        logger.info("Deleting %s from %s/%s", path, owner, repo)
        try:
            response = self._request("DELETE", endpoint, json=body)
        except REQUEST_ERRORS as e:
            raise RemoteError(None, str(e)) from e

        if not _is_success(response):
            logger.error("Delete of %s failed (status=%d)", path, response.status_code)
            raise RemoteError(response.status_code, response.text)
