"""GitHub-backed image host."""

from .errors import AuthError, PicbedError, RemoteError, UploadError, ValidationError
from .listing import ListingService, extract_timestamp, sort_newest_first
from .models import FileInfo, RepositoryRef, UploadRequest, UploadResult
from .naming import build_stored_path, stamp_filename
from .session import SessionContext, SessionStore
from .uploader import Uploader

__all__ = [
    "Uploader",
    "ListingService",
    "SessionContext",
    "SessionStore",
    "FileInfo",
    "RepositoryRef",
    "UploadRequest",
    "UploadResult",
    "AuthError",
    "PicbedError",
    "RemoteError",
    "UploadError",
    "ValidationError",
    "build_stored_path",
    "stamp_filename",
    "extract_timestamp",
    "sort_newest_first",
]
