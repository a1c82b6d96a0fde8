# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import SessionToken, User


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def add(self, user: User) -> User: ...
    def update_password_hash(self, user_id: int, password_hash: str) -> None: ...


class SessionTokenRepository(Protocol):
    def find_by_token(self, token: str) -> SessionToken | None: ...
    def list_for_user(self, user_id: int) -> Sequence[SessionToken]: ...
    def add(self, token: SessionToken) -> SessionToken: ...
    def delete(self, token_id: int) -> None: ...
    def delete_for_user(self, user_id: int) -> int: ...
    def replace_for_user(
        self, token: SessionToken, *, expected_password_hash: str | None = None
    ) -> SessionToken: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
