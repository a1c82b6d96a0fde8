"""Use-case for revoking access tokens."""

from __future__ import annotations

from passport.application.services.session_manager import SessionManager
from passport.domain.users.entities import User


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionManager) -> None:
        self._sessions = sessions

    def execute(self, user: User) -> int:
        return self._sessions.revoke_all(user)
