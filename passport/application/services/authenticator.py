# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request-time credential resolution.

Both modes are read-only: a successful password check does not issue a token,
callers invoke ``SessionManager.sign_in`` for that.
"""

from __future__ import annotations

from passport.domain.users.entities import User
from passport.domain.users.exceptions import (
    InvalidCredentialsError,
    MissingOrMalformedHeaderError,
    MissingUserError,
)
from passport.domain.users.repositories import UserRepository

from .credentials import CredentialVerifier
from .session_manager import SessionManager

BEARER_SCHEME = "bearer"


def parse_bearer_header(value: str | None) -> str:
    if not value:
        raise MissingOrMalformedHeaderError()
    parts = value.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        raise MissingOrMalformedHeaderError()
    token = parts[1].strip()
    if not token or any(ch.isspace() for ch in token):
        raise MissingOrMalformedHeaderError()
    return token


class Authenticator:
    def __init__(
        self,
        *,
        users: UserRepository,
        credentials: CredentialVerifier,
        sessions: SessionManager,
    ) -> None:
        self._users = users
        self._credentials = credentials
        self._sessions = sessions

    def authenticate_password(self, identifier: str | None, plaintext: str | None) -> User:
        user = self._users.find_by_email(identifier) if identifier else None
        if user is None:
            raise MissingUserError()
        if not self._credentials.verify(plaintext or "", user.password_hash):
            raise InvalidCredentialsError()
        return user

    def authenticate_bearer(self, authorization: str | None) -> User:
        token = parse_bearer_header(authorization)
        return self._sessions.resolve(token)
