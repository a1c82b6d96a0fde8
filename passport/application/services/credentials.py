# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from threading import Lock

from passport.domain.users.entities import User
from passport.domain.users.exceptions import (
    DuplicateEmailError,
    HashingUnavailableError,
    MissingPasswordError,
)
from passport.domain.users.repositories import PasswordHasher, UserRepository
from passport.shared.errors import ConfigurationError
from passport.shared.logging import logger


class CredentialVerifier:
    """Hashes and checks passwords through a long-lived hashing collaborator.

    The collaborator is built on first use from ``hasher_factory`` and reused
    afterwards; a factory that fails with ``ConfigurationError`` surfaces as
    ``HashingUnavailableError`` on every call until it succeeds.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        hasher_factory: Callable[[], PasswordHasher],
    ) -> None:
        self._users = users
        self._hasher_factory = hasher_factory
        self._hasher: PasswordHasher | None = None
        self._lock = Lock()

    def _get_hasher(self) -> PasswordHasher:
        if self._hasher is not None:
            return self._hasher
        with self._lock:
            if self._hasher is None:
                try:
                    self._hasher = self._hasher_factory()
                except ConfigurationError as exc:
                    logger.error(f"credentials: hashing collaborator unavailable ({exc.code})")
                    raise HashingUnavailableError(context=exc.context) from exc
            return self._hasher

    def hash(self, plaintext: str) -> str:
        return self._get_hasher().hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        return self._get_hasher().verify(plaintext, digest)

    def register_new_user(self, name: str, email: str, plaintext: str | None) -> User:
        if self._users.find_by_email(email) is not None:
            logger.warning("credentials.register: email already registered")
            raise DuplicateEmailError()
        if not plaintext:
            raise MissingPasswordError()

        digest = self.hash(plaintext)
        user = User(
            id=0,
            name=name,
            email=email,
            password_hash=digest,
            created_at=datetime.now(UTC),
        )
        persisted = self._users.add(user)
        logger.info(f"credentials.register: created user_id={persisted.id}")
        return persisted
