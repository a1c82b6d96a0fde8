# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import SessionToken, User
from .users.exceptions import (
    DuplicateEmailError,
    HashingUnavailableError,
    InvalidCredentialsError,
    MissingEmailError,
    MissingOrMalformedHeaderError,
    MissingPasswordError,
    MissingUserError,
    StoreUnavailableError,
    TokenExpiredError,
    TokenGenerationError,
    TokenNotFoundError,
)

__all__ = [
    "SessionToken",
    "User",
    "DuplicateEmailError",
    "HashingUnavailableError",
    "InvalidCredentialsError",
    "MissingEmailError",
    "MissingOrMalformedHeaderError",
    "MissingPasswordError",
    "MissingUserError",
    "StoreUnavailableError",
    "TokenExpiredError",
    "TokenGenerationError",
    "TokenNotFoundError",
]
