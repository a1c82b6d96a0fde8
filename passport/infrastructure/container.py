# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from passport.application.services.authenticator import Authenticator
from passport.application.services.credentials import CredentialVerifier
from passport.application.services.password_hashing import build_password_hasher
from passport.application.services.session_manager import SessionManager
from passport.application.use_cases.users.change_password import ChangePasswordUseCase
from passport.application.use_cases.users.login_user import LoginUserUseCase
from passport.application.use_cases.users.logout_user import LogoutUserUseCase
from passport.application.use_cases.users.register_user import RegisterUserUseCase
from passport.domain.users.repositories import PasswordHasher
from passport.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionTokenRepository, SqlAlchemyUserRepository)
from passport.interfaces.http.controllers.auth_controller import AuthController
from passport.interfaces.http.controllers.misc_controller import MiscController
from passport.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        engine: Engine | None = None,
        hasher_factory: Callable[[], PasswordHasher] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or load_config()
        self._engine = engine
        self._hasher_factory = hasher_factory
        self._clock = clock

    @cached_property
    def engine(self) -> Engine:
        if self._engine is not None:
            return self._engine
        from passport.infrastructure.db import ENGINE

        return ENGINE

    @cached_property
    def session_factory(self) -> Callable[[], Session]:
        return sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def session_token_repository(self) -> SqlAlchemySessionTokenRepository:
        return SqlAlchemySessionTokenRepository(self.session_factory)

    @cached_property
    def credential_verifier(self) -> CredentialVerifier:
        hasher_factory = self._hasher_factory or (
            lambda: build_password_hasher(self.config.hashing)
        )
        return CredentialVerifier(users=self.user_repository, hasher_factory=hasher_factory)

    @cached_property
    def session_manager(self) -> SessionManager:
        if self._clock is None:
            return SessionManager(
                users=self.user_repository, tokens=self.session_token_repository
            )
        return SessionManager(
            users=self.user_repository,
            tokens=self.session_token_repository,
            clock=self._clock,
        )

    @cached_property
    def authenticator(self) -> Authenticator:
        return Authenticator(
            users=self.user_repository,
            credentials=self.credential_verifier,
            sessions=self.session_manager,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(credentials=self.credential_verifier)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(authenticator=self.authenticator, sessions=self.session_manager)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_manager)

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(
            users=self.user_repository,
            credentials=self.credential_verifier,
            sessions=self.session_manager,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            authenticator=self.authenticator,
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            change_password_use_case=self.change_password_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
