"""Picbed configuration, read from the environment and an optional .env file."""

import os
from functools import partial
from pathlib import Path

from dotenv import load_dotenv
from gh import GitHubClient, OAuthApp
from pydantic import BaseModel

DEFAULT_SESSION_FILE = Path.home() / ".config" / "picbed" / "session.json"


class Settings(BaseModel):
    """Runtime settings."""

    github_token: str | None = None
    api_url: str = GitHubClient.BASE_URL
    timeout: float = 30.0
    max_retries: int = 1
    session_file: Path = DEFAULT_SESSION_FILE
    default_path: str = ""
    oauth_client_id: str | None = None
    oauth_client_secret: str | None = None
    oauth_redirect_uri: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings; `.env` in the working directory is honoured."""
        load_dotenv()
        env = os.environ
        values = {
            "github_token": env.get("GH_TOKEN") or env.get("GITHUB_TOKEN"),
            "api_url": env.get("PICBED_API_URL"),
            "timeout": env.get("PICBED_TIMEOUT"),
            "max_retries": env.get("PICBED_MAX_RETRIES"),
            "session_file": env.get("PICBED_SESSION_FILE"),
            "default_path": env.get("PICBED_DEFAULT_PATH"),
            "oauth_client_id": env.get("GITHUB_CLIENT_ID"),
            "oauth_client_secret": env.get("GITHUB_CLIENT_SECRET"),
            "oauth_redirect_uri": env.get("GITHUB_REDIRECT_URI"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})

    def client_factory(self):
        """Build GitHub clients for a token with these settings."""
        return partial(
            GitHubClient,
            base_url=self.api_url,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

    def oauth_app(self) -> OAuthApp | None:
        """OAuth app, or None when client credentials are not configured."""
        if not (self.oauth_client_id and self.oauth_client_secret):
            return None
        return OAuthApp(
            client_id=self.oauth_client_id,
            client_secret=self.oauth_client_secret,
            redirect_uri=self.oauth_redirect_uri,
            timeout=self.timeout,
        )
