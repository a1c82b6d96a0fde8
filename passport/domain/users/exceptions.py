# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from passport.shared.errors.base import DomainError, InfrastructureError


class DuplicateEmailError(DomainError):
    code = "duplicate_email"


class MissingPasswordError(DomainError):
    code = "missing_password"


class MissingEmailError(DomainError):
    code = "missing_email"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"


class MissingUserError(DomainError):
    code = "missing_user"


class TokenNotFoundError(DomainError):
    code = "token_not_found"
    status = HTTPStatus.UNAUTHORIZED


class TokenExpiredError(DomainError):
    code = "token_expired"
    status = HTTPStatus.UNAUTHORIZED


class MissingOrMalformedHeaderError(DomainError):
    code = "missing_or_malformed_header"
    status = HTTPStatus.UNAUTHORIZED


class HashingUnavailableError(InfrastructureError):
    code = "hashing_unavailable"


class StoreUnavailableError(InfrastructureError):
    code = "store_unavailable"
    status = HTTPStatus.SERVICE_UNAVAILABLE


class TokenGenerationError(InfrastructureError):
    code = "token_generation_failed"
