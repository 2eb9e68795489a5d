"""Submission handling in post/redirect/get style.

Each handler takes the session explicitly, records its outcome in the
session relay, and returns where the caller should go next.
"""

import logging
from typing import Callable

from gh import AuthError, GitHubClient, RemoteError

from .errors import UploadError, ValidationError
from .links import pages_site_url
from .listing import ListingService
from .models import Dashboard, DeleteRequest, RepositoryRef, UploadRequest
from .session import SessionContext
from .uploader import Uploader

logger = logging.getLogger(__name__)

INDEX = "/"
DASHBOARD = "/dashboard"
LOGOUT = "/logout"

PAGES_REPO_DESCRIPTION = "GitHub Pages - Image Storage"

ClientFactory = Callable[[str], GitHubClient]


def login(ctx: SessionContext, token: str, client_factory: ClientFactory = GitHubClient) -> str:
    """
    Accept a token only if GitHub recognises it.

    Raises:
        AuthError: token rejected; the session is left logged out
    """
    client_factory(token).get_user()
    ctx.logout()
    ctx.login(token)
    return DASHBOARD


def submit_upload(
    ctx: SessionContext,
    request: UploadRequest,
    client_factory: ClientFactory = GitHubClient,
    uploader_factory: Callable[[GitHubClient], Uploader] = Uploader,
) -> str:
    if not ctx.session_token:
        return INDEX

    uploader = uploader_factory(client_factory(ctx.session_token))
    try:
        result = uploader.upload(request)
    except AuthError:
        ctx.logout()
        return LOGOUT
    except (ValidationError, UploadError) as e:
        ctx.record_error(str(e))
        return DASHBOARD

    ctx.record_result(result)
    return DASHBOARD


def submit_delete(
    ctx: SessionContext,
    request: DeleteRequest,
    client_factory: ClientFactory = GitHubClient,
) -> str:
    if not ctx.session_token:
        return INDEX

    client = client_factory(ctx.session_token)
    try:
        client.get_user()
        repo = RepositoryRef.parse(request.repo)
        client.delete_file(repo.owner, repo.name, request.path, request.content_hash)
    except AuthError:
        ctx.logout()
        return LOGOUT
    except ValidationError as e:
        ctx.record_error(str(e))
        return DASHBOARD
    except RemoteError as e:
        ctx.record_error(f"Delete failed: {e}")
        return DASHBOARD

    logger.info("Deleted %s from %s", request.path, repo.full_name)
    return DASHBOARD


def load_dashboard(
    ctx: SessionContext,
    path: str = "",
    client_factory: ClientFactory = GitHubClient,
) -> Dashboard:
    """
    Gather the dashboard and drain the relay.

    The user's Pages repository is created on first visit.

    Raises:
        AuthError: no token or token rejected; the session is cleared
    """
    if not ctx.session_token:
        raise AuthError("Not logged in")

    client = client_factory(ctx.session_token)
    try:
        username = client.get_user().login
    except AuthError:
        ctx.logout()
        raise

    repo = RepositoryRef.pages(username)
    if not client.repository_exists(repo.owner, repo.name):
        try:
            client.create_repository(repo.name, PAGES_REPO_DESCRIPTION)
        except RemoteError as e:
            logger.warning("Could not create %s: %s", repo.full_name, e)

    result = ctx.take_upload_result()
    error = ctx.take_upload_error()
    files = ListingService(client).list(repo.owner, repo.name, path)

    return Dashboard(
        username=username,
        repo=repo.name,
        uploaded_link=result.cdn_link if result else None,
        pages_link=(result.pages_link if result and result.pages_link else pages_site_url(username)),
        error=error,
        files=files,
    )
