# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from passport.application.services.credentials import CredentialVerifier
from passport.application.services.session_manager import SessionManager
from passport.domain.users.entities import User
from passport.domain.users.exceptions import MissingPasswordError
from passport.domain.users.repositories import UserRepository
from passport.shared.logging import logger


class ChangePasswordUseCase:
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

    def execute(self, user: User, new_password: str | None) -> int:
        if not new_password:
            raise MissingPasswordError()

        # Hash before touching the store.
        digest = self._credentials.hash(new_password)
        self._users.update_password_hash(user.id, digest)
        # A digest change invalidates every token the user holds. Sign-ins that
        # verified the old password are refused at issue time.
        revoked = self._sessions.revoke_all(user)
        logger.info(f"auth.change_password: user={user.id} revoked_tokens={revoked}")
        return revoked
