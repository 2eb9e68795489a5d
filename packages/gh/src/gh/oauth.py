"""GitHub OAuth web flow: authorize URL and code-for-token exchange."""

import logging
import secrets
from urllib.parse import urlencode

import httpx

from .client import REQUEST_ERRORS
from .errors import AuthError

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"
DEFAULT_SCOPE = "repo"


class OAuthApp:
    """A registered GitHub OAuth app.

    Produces the same opaque bearer token a user could paste by hand.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str | None = None,
        scope: str = DEFAULT_SCOPE,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scope = scope
        self.timeout = timeout
        self.transport = transport

    def authorize_url(self, state: str | None = None) -> tuple[str, str]:
        """
        Build the URL the user visits to grant access.

        Returns:
            (url, state) - state is generated when not given
        """
        state = state or secrets.token_urlsafe(16)
        params = {"client_id": self.client_id, "scope": self.scope, "state": state}
        if self.redirect_uri:
            params["redirect_uri"] = self.redirect_uri
        return f"{AUTHORIZE_URL}?{urlencode(params)}", state

    def exchange_code(self, code: str) -> str:
        """
        Exchange an authorization code for an access token.

        Raises:
            AuthError: if GitHub does not hand back a token
        """
        body = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
        }
        if self.redirect_uri:
            body["redirect_uri"] = self.redirect_uri

        logger.info("Exchanging OAuth code for token")
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(TOKEN_URL, data=body, headers={"Accept": "application/json"})
        except REQUEST_ERRORS as e:
            logger.error("OAuth token exchange error: %s", e)
            raise AuthError(f"OAuth token exchange failed: {e}") from e

        if response.status_code != 200:
            logger.error("OAuth token exchange rejected (status=%d)", response.status_code)
            raise AuthError("OAuth token exchange failed")

        try:
            data = response.json()
        except ValueError as e:
            raise AuthError("OAuth token exchange returned a non-JSON body") from e

        # GitHub reports bad codes with 200 and an "error" field
        token = data.get("access_token")
        if data.get("error") or not token:
            logger.error("OAuth token exchange refused: %s", data.get("error", "no token"))
            raise AuthError(data.get("error_description") or "OAuth token exchange failed")
        return token
