# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Mapping

from flask import Flask, Response, g, request

from passport.shared.config import load_config
from passport.shared.logging import (clear_correlation_id, get_correlation_id, logger,
                                     set_correlation_id)

_SECRET_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def _fingerprint_headers(headers: Mapping[str, str]) -> dict[str, str]:
    # Credentials are replaced by a short digest so repeated values stay correlatable.
    return {
        key: (
            f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"
            if key.lower() in _SECRET_HEADERS
            else value
        )
        for key, value in headers.items()
    }


def configure_request_logging(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.before_request
    def _start() -> None:
        set_correlation_id(request.headers.get("X-Request-ID") or secrets.token_urlsafe(8))
        g.request_started = time.perf_counter()
        if verbose:
            logger.debug(
                f"-> {request.method} {request.path} from {client_ip()} "
                f"headers={_fingerprint_headers(dict(request.headers))}"
            )
        else:
            logger.info(f"-> {request.method} {request.path} from {client_ip()}")

    @app.after_request
    def _finish(response: Response) -> Response:
        elapsed = time.perf_counter() - g.get("request_started", time.perf_counter())
        user = g.get("current_user")
        logger.info(
            f"<- {request.method} {request.path} status={response.status_code} "
            f"user={getattr(user, 'id', None)} in {elapsed:.3f}s"
        )
        response.headers.setdefault("X-Request-ID", get_correlation_id())
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request failed: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["client_ip", "configure_request_logging"]
