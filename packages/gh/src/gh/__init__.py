"""GitHub API client utilities."""

from .client import GitHubClient, get_token
from .errors import AuthError, GitHubError, RemoteError
from .models import GitHubCommit, GitHubContent, GitHubUser
from .oauth import OAuthApp

__all__ = [
    "GitHubClient",
    "GitHubCommit",
    "GitHubContent",
    "GitHubUser",
    "GitHubError",
    "AuthError",
    "RemoteError",
    "OAuthApp",
    "get_token",
]
