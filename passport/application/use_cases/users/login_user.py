# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from passport.application.services.authenticator import Authenticator
from passport.application.services.session_manager import SessionManager
from passport.domain.users.entities import SessionToken, User


class LoginUserUseCase:
    def __init__(self, *, authenticator: Authenticator, sessions: SessionManager) -> None:
        self._authenticator = authenticator
        self._sessions = sessions

    def execute(self, email: str | None, password: str | None) -> tuple[User, SessionToken]:
        user = self._authenticator.authenticate_password(email, password)
        token = self._sessions.sign_in(user)
        return user, token
