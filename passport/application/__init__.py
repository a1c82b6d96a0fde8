# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.authenticator import Authenticator, parse_bearer_header
from .services.credentials import CredentialVerifier
from .services.session_manager import SessionManager
from .use_cases.users.change_password import ChangePasswordUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.logout_user import LogoutUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase

__all__ = [
    "Authenticator",
    "ChangePasswordUseCase",
    "CredentialVerifier",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RegisterUserUseCase",
    "SessionManager",
    "parse_bearer_header",
]
