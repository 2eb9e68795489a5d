"""GitHub API errors."""


class GitHubError(Exception):
    """Base error for GitHub API failures."""


class AuthError(GitHubError):
    """Token is missing, invalid, expired, or could not be checked."""


class RemoteError(GitHubError):
    """GitHub rejected a request.

    The error body is kept raw: GitHub error payloads are not uniform, so
    callers get the text exactly as it came back.
    """

    def __init__(self, status_code: int | None, raw_body: str):
        self.status_code = status_code
        self.raw_body = raw_body
        super().__init__(raw_body or f"HTTP {status_code}")
