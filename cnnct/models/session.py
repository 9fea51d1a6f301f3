"""Session context for the signed-in user.

The dashboard needs to know who is signed in (to list their events and to
act on their own invitations). Instead of reading that from ambient
storage, callers build a SessionContext and pass it in explicitly, with
an explicit load/save lifecycle backed by a small JSON file.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

from cnnct.core.config import settings
from cnnct.core.exceptions import SessionError

logger = logging.getLogger(__name__)


class SessionContext(BaseModel):
    """Who is signed in and how dates should be shown to them.

    Attributes:
        user_id: Id of the signed-in user, owner of listed events.
        email: Email of the signed-in user.
        name: Display name.
        token: Bearer token handed out at sign-in, opaque here.
        timezone: IANA timezone used for naive meeting dates.
    """
    user_id: str
    email: str = ""
    name: str = ""
    token: str | None = None
    timezone: str = settings.default_timezone

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @classmethod
    def load(cls, path: Path | None = None) -> "SessionContext | None":
        """
        Load a saved session.

        Returns None when no session has been saved yet.

        Raises:
            SessionError: If the file exists but cannot be read or parsed.
        """
        path = path or settings.session_file
        if not path.exists():
            return None
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise SessionError(f"Cannot load session from {path}: {e}") from e

    def save(self, path: Path | None = None) -> Path:
        """Persist this session and return the file it was written to."""
        path = path or settings.session_file
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise SessionError(f"Cannot save session to {path}: {e}") from e
        logger.debug(f"Saved session for user {self.user_id} to {path}")
        return path

    @staticmethod
    def clear(path: Path | None = None) -> None:
        """Forget the saved session (sign out)."""
        path = path or settings.session_file
        path.unlink(missing_ok=True)
