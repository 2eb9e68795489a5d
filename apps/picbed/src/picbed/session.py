"""Session context: the credential plus read-once upload outcome."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from .models import UploadResult

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "sessionToken"
LAST_UPLOAD_RESULT_KEY = "lastUploadResult"
LAST_UPLOAD_ERROR_KEY = "lastUploadError"


class SessionContext(BaseModel):
    """Request-scoped session state, passed explicitly to every workflow."""

    session_token: str | None = None
    last_upload_result: UploadResult | None = None
    last_upload_error: str | None = None

    @property
    def authenticated(self) -> bool:
        return bool(self.session_token)

    def login(self, token: str) -> None:
        self.session_token = token

    def logout(self) -> None:
        """Drop the credential and anything relayed with it."""
        self.session_token = None
        self.last_upload_result = None
        self.last_upload_error = None

    def record_result(self, result: UploadResult) -> None:
        self.last_upload_result = result

    def record_error(self, message: str) -> None:
        self.last_upload_error = message

    def take_upload_result(self) -> UploadResult | None:
        """Return the last upload result once, then forget it."""
        result, self.last_upload_result = self.last_upload_result, None
        return result

    def take_upload_error(self) -> str | None:
        """Return the last error once, then forget it."""
        error, self.last_upload_error = self.last_upload_error, None
        return error

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.session_token:
            data[SESSION_TOKEN_KEY] = self.session_token
        if self.last_upload_result:
            data[LAST_UPLOAD_RESULT_KEY] = {
                "cdnLink": self.last_upload_result.cdn_link,
                "pagesLink": self.last_upload_result.pages_link,
            }
        if self.last_upload_error:
            data[LAST_UPLOAD_ERROR_KEY] = self.last_upload_error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionContext":
        result = data.get(LAST_UPLOAD_RESULT_KEY)
        return cls(
            session_token=data.get(SESSION_TOKEN_KEY),
            last_upload_result=(
                UploadResult(cdn_link=result["cdnLink"], pages_link=result.get("pagesLink"))
                if result and result.get("cdnLink")
                else None
            ),
            last_upload_error=data.get(LAST_UPLOAD_ERROR_KEY),
        )


class SessionStore:
    """Keeps a session between CLI runs in a JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> SessionContext:
        if not self.path.exists():
            return SessionContext()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return SessionContext.from_dict(json.load(f))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return SessionContext()

    def save(self, ctx: SessionContext) -> None:
        data = ctx.to_dict()
        if not data:
            self.clear()
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # The file holds a bearer token: owner-only from creation on.
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
