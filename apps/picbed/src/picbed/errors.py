"""Picbed error types."""

from gh import AuthError, RemoteError


class PicbedError(Exception):
    """Base error raised by picbed itself."""


class ValidationError(PicbedError):
    """Client input is malformed; shown back to the user as-is."""


class UploadError(RemoteError):
    """The commit step of an upload was rejected."""

    def __init__(self, status_code: int | None, raw_body: str):
        super().__init__(status_code, raw_body)
        self.args = (f"Upload failed: {raw_body or f'HTTP {status_code}'}",)


__all__ = ["AuthError", "PicbedError", "RemoteError", "UploadError", "ValidationError"]
