# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from passport.application.services.credentials import CredentialVerifier
from passport.domain.users.entities import User
from passport.domain.users.exceptions import MissingEmailError


class RegisterUserUseCase:
    def __init__(self, *, credentials: CredentialVerifier) -> None:
        self._credentials = credentials

    def execute(self, name: str, email: str | None, password: str | None) -> User:
        # Registration never signs the user in.
        if not email:
            raise MissingEmailError()
        return self._credentials.register_new_user(name, email, password)
