# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from passport.domain.users.entities import SessionToken, User
from passport.domain.users.exceptions import (
    StoreUnavailableError,
    TokenExpiredError,
    TokenNotFoundError,
)
from passport.domain.users.expiration import expiry_of
from passport.domain.users.repositories import SessionTokenRepository, UserRepository
from passport.domain.users.token_codec import ensure_utc, new_opaque_token
from passport.shared.logging import logger, token_hint


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionManager:
    """Issues, reuses, resolves and revokes bearer tokens.

    Nothing is cached between calls: every operation reads the store, so
    concurrent requests for the same user observe each other's writes. After
    ``sign_in`` returns, the user owns exactly one unexpired token.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: SessionTokenRepository,
        clock: Callable[[], datetime] = _utcnow,
        token_factory: Callable[[], str] = new_opaque_token,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._clock = clock
        self._token_factory = token_factory

    def sign_in(self, user: User) -> SessionToken:
        now = self._clock()
        owned = self._tokens.list_for_user(user.id)

        valid: list[SessionToken] = []
        stale: list[SessionToken] = []
        for token in owned:
            (stale if token.is_expired(now) else valid).append(token)

        for token in stale:
            self._discard(token)

        if len(valid) == 1:
            logger.debug(f"sessions.sign_in: reusing token user={user.id} tok={token_hint(valid[0].token)}")
            return valid[0]

        if valid:
            logger.warning(f"sessions.sign_in: collapsing {len(valid)} active tokens user={user.id}")
        return self.issue(user)

    def issue(self, user: User) -> SessionToken:
        """Mint a new token for ``user``, replacing every token it already owns."""
        issued_at = ensure_utc(self._clock())
        candidate = SessionToken(
            id=0,
            user_id=user.id,
            token=self._token_factory(),
            issued_at=issued_at,
            expiration_time=expiry_of(issued_at),
        )
        # A password change since `user` was read voids this sign-in.
        token = self._tokens.replace_for_user(
            candidate, expected_password_hash=user.password_hash
        )
        logger.info(
            f"Issued token for user={user.id} exp={token.expiration_time} tok={token_hint(token.token)}"
        )
        return token

    def resolve(self, bearer_token: str) -> User:
        token = self._tokens.find_by_token(bearer_token)
        if token is None:
            raise TokenNotFoundError()

        if token.is_expired(self._clock()):
            self._discard(token)
            raise TokenExpiredError()

        user = self._users.find_by_id(token.user_id)
        if user is None:
            logger.warning(f"sessions.resolve: token owner missing user={token.user_id}")
            raise TokenNotFoundError()
        return user

    def revoke_all(self, user: User) -> int:
        removed = self._tokens.delete_for_user(user.id)
        logger.info(f"sessions.revoke_all: user={user.id} removed={removed}")
        return removed

    def _discard(self, token: SessionToken) -> None:
        try:
            self._tokens.delete(token.id)
        except StoreUnavailableError:
            logger.warning(
                f"sessions: failed to delete expired token user={token.user_id} tok={token_hint(token.token)}"
            )
