# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import cast

from flask import g, request

from passport.application.services.authenticator import Authenticator
from passport.domain.users.entities import User
from passport.shared.logging import logger


def bearer_required(authenticator: Authenticator) -> Callable[[Callable], Callable]:
    """Resolve ``Authorization: Bearer <token>`` before running the view.

    Rejections propagate as ``AppError`` and are rendered by the error handler.
    """

    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def inner(*a, **kw):
            try:
                user = authenticator.authenticate_bearer(request.headers.get("Authorization"))
            except Exception:
                logger.warning(f"Auth failed on {request.method} {request.path}")
                raise
            g.current_user = user
            logger.debug(f"Auth OK: user={user.id} {request.method} {request.path}")
            return f(*a, **kw)

        return inner

    return decorator


def current_user() -> User:
    """Return the user resolved by ``bearer_required`` for this request."""
    return cast(User, g.current_user)


__all__ = ["bearer_required", "current_user"]
