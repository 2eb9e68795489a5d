"""CLI for picbed."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import click
from gh import AuthError, get_token

from . import gateway
from .config import Settings
from .errors import ValidationError
from .listing import DEFAULT_LIMIT, ListingService
from .models import DeleteRequest, RepositoryRef, UploadRequest
from .session import SessionContext, SessionStore

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4


def setup_logging(verbose: int) -> None:
    """Setup logging."""
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def require_session(ctx: click.Context) -> SessionContext:
    session: SessionContext = ctx.obj["session"]
    if not session.authenticated:
        click.echo("Not logged in. Run `picbed login` first.", err=True)
        raise SystemExit(1)
    return session


def force_logout(ctx: click.Context) -> None:
    ctx.obj["session"].logout()
    ctx.obj["store"].clear()
    click.echo("GitHub rejected the token; you have been logged out.", err=True)
    raise SystemExit(1)


# ============ CLI Group ============

@click.group()
@click.option("--session-file", type=click.Path(dir_okay=False, path_type=Path), envvar="PICBED_SESSION_FILE", help="Session file")
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv)")
@click.pass_context
def cli(ctx: click.Context, session_file: Path | None, verbose: int) -> None:
    """Upload images to GitHub and get CDN links."""
    setup_logging(verbose)
    settings = Settings.from_env()
    if session_file:
        settings.session_file = session_file
    store = SessionStore(settings.session_file)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["store"] = store
    ctx.obj["session"] = store.load()
    ctx.obj["client_factory"] = settings.client_factory()


# ============ Session Commands ============

@cli.command()
@click.option("--token", help="GitHub personal access token (falls back to GH_TOKEN/GITHUB_TOKEN)")
@click.option("--use-gh-cli", is_flag=True, help="Use gh cli credentials")
@click.option("--oauth", "use_oauth", is_flag=True, help="Log in through the GitHub OAuth app")
@click.pass_context
def login(ctx, token, use_gh_cli, use_oauth):
    """Store a validated GitHub token."""
    settings: Settings = ctx.obj["settings"]
    if use_oauth:
        app = settings.oauth_app()
        if app is None:
            click.echo("Error: GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET required for --oauth", err=True)
            raise SystemExit(1)
        url, _state = app.authorize_url()
        click.echo(f"Open this URL and authorize picbed:\n  {url}")
        code = click.prompt("Authorization code")
        try:
            token = app.exchange_code(code)
        except AuthError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1)
    else:
        token = get_token(token, use_gh_cli=use_gh_cli)
        if not token:
            token = click.prompt("GitHub token", hide_input=True)

    session: SessionContext = ctx.obj["session"]
    try:
        gateway.login(session, token, ctx.obj["client_factory"])
    except AuthError:
        click.echo("Error: Invalid GitHub Token", err=True)
        raise SystemExit(1)
    ctx.obj["store"].save(session)
    click.echo("Logged in.")


@cli.command()
@click.pass_context
def logout(ctx):
    """Forget the stored token."""
    ctx.obj["session"].logout()
    ctx.obj["store"].clear()
    click.echo("Logged out.")


@cli.command()
@click.pass_context
def whoami(ctx):
    """Show the user the stored token belongs to."""
    session = require_session(ctx)
    try:
        user = ctx.obj["client_factory"](session.session_token).get_user()
    except AuthError:
        force_logout(ctx)
    click.echo(user.login)


# ============ File Commands ============

@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-r", "--repo", envvar="PICBED_REPO", help="Target repository as owner/name (default: <user>.github.io)")
@click.option("-p", "--path", "path_prefix", envvar="PICBED_DEFAULT_PATH", default=None, help="Directory inside the repository")
@click.option("-j", "--concurrency", type=int, default=DEFAULT_CONCURRENCY, show_default=True)
@click.pass_context
def upload(ctx, files, repo, path_prefix, concurrency):
    """Upload one or more files."""
    session = require_session(ctx)
    settings: Settings = ctx.obj["settings"]
    client_factory = ctx.obj["client_factory"]
    prefix = settings.default_path if path_prefix is None else path_prefix

    lock = threading.Lock()
    failures = 0
    rejected = False

    def upload_one(file_path: Path) -> None:
        nonlocal failures, rejected
        request = UploadRequest(
            target_repo=repo,
            path_prefix=prefix,
            filename=file_path.name,
            data=file_path.read_bytes(),
        )
        # Each upload gets its own context; outcomes are merged under the lock.
        own = SessionContext(session_token=session.session_token)
        target = gateway.submit_upload(own, request, client_factory)
        result = own.take_upload_result()
        error = own.take_upload_error()
        with lock:
            if target == gateway.LOGOUT:
                rejected = True
            elif result:
                session.record_result(result)
                click.echo(f"{file_path.name}: {result.cdn_link}")
                if result.pages_link:
                    click.echo(f"  pages: {result.pages_link}")
            elif error:
                failures += 1
                session.record_error(error)
                click.echo(f"{file_path.name}: {error}", err=True)

    with ThreadPoolExecutor(max_workers=max(1, concurrency)) as pool:
        futures = [pool.submit(upload_one, f) for f in files]
        for future in as_completed(futures):
            future.result()

    if rejected:
        force_logout(ctx)
    ctx.obj["store"].save(session)
    if failures:
        raise SystemExit(1)


@cli.command(name="list")
@click.option("-r", "--repo", envvar="PICBED_REPO", help="Repository as owner/name (default: <user>.github.io)")
@click.option("-p", "--path", default="", help="Directory inside the repository")
@click.option("-n", "--limit", type=int, default=DEFAULT_LIMIT, show_default=True)
@click.pass_context
def list_files(ctx, repo, path, limit):
    """List uploaded files, newest first."""
    session = require_session(ctx)
    client = ctx.obj["client_factory"](session.session_token)
    try:
        username = client.get_user().login
    except AuthError:
        force_logout(ctx)
    try:
        target = RepositoryRef.resolve(repo, username)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    files = ListingService(client).list(target.owner, target.name, path, limit=limit)
    if not files:
        click.echo("No files.")
        return
    for f in files:
        click.echo(f"{f.path}\t{f.size_bytes}\t{f.content_hash}")


@cli.command()
@click.argument("repo")
@click.argument("path")
@click.argument("sha")
@click.pass_context
def delete(ctx, repo, path, sha):
    """Delete PATH from REPO (owner/name); SHA comes from `picbed list`."""
    session = require_session(ctx)
    own = SessionContext(session_token=session.session_token)
    target = gateway.submit_delete(
        own,
        DeleteRequest(repo=repo, path=path, content_hash=sha),
        ctx.obj["client_factory"],
    )
    if target == gateway.LOGOUT:
        force_logout(ctx)
    error = own.take_upload_error()
    if error:
        session.record_error(error)
        ctx.obj["store"].save(session)
        click.echo(error, err=True)
        raise SystemExit(1)
    click.echo(f"Deleted {path}")


@cli.command()
@click.option("-p", "--path", default="", help="Directory inside the Pages repository")
@click.pass_context
def dashboard(ctx, path):
    """Show the last upload outcome and the Pages repository contents."""
    session = require_session(ctx)
    try:
        board = gateway.load_dashboard(session, path, ctx.obj["client_factory"])
    except AuthError:
        force_logout(ctx)
    ctx.obj["store"].save(session)

    click.echo(f"User: {board.username}")
    click.echo(f"Repository: {board.username}/{board.repo}")
    click.echo(f"Pages: {board.pages_link}")
    if board.uploaded_link:
        click.echo(f"Last upload: {board.uploaded_link}")
    if board.error:
        click.echo(f"Last error: {board.error}", err=True)
    click.echo()
    for f in board.files:
        click.echo(f"{f.path}\t{f.size_bytes}")
    if not board.files:
        click.echo("No files yet.")


if __name__ == "__main__":
    cli()
