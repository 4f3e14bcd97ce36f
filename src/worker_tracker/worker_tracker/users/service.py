from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from werkzeug.security import check_password_hash

from ..core.exceptions import AuthenticationError, AuthorizationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """Identity of the signed-in user.

    Built from the Flask session on each request and passed explicitly to
    every service call; repositories only ever see ``user_id``.
    """

    user_id: int
    username: str
    full_name: str

    def to_session(self) -> dict:
        return {"user_id": self.user_id, "username": self.username, "name": self.full_name}

    @classmethod
    def from_session(cls, session: Mapping) -> Optional["SessionUser"]:
        if "user_id" not in session:
            return None
        return cls(
            user_id=int(session["user_id"]),
            username=str(session.get("username") or ""),
            full_name=str(session.get("name") or ""),
        )


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            logger.warning("Unreadable password hash for user %s", user.username)
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        return SessionUser(user_id=user.user_id, username=user.username, full_name=user.full_name)

    def check_session(self, user: SessionUser) -> None:
        """Reject a session whose account was removed or deactivated since login."""
        account = self._users.get_by_id(user.user_id)
        if not account or not account.is_active:
            raise AuthorizationError("Your account is no longer active. Please sign in again.")
