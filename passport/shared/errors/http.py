# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from passport.shared.logging import logger

from .base import AppError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def register_error_handler(
    app: Flask,
    *,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
    debug_mode: bool = False,
) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        where = f"{request.method} {request.path}"
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(f"{exc.code} ({int(exc.status)}) on {where}")
        else:
            logger.warning(f"{exc.code} ({int(exc.status)}) on {where}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        where = f"{request.method} {request.path}"
        if debug_mode:
            logger.exception(f"Unhandled {type(exc).__name__} on {where}")
        else:
            logger.error(f"Unhandled {type(exc).__name__} on {where}")
        return jsonify({"error": "internal_error"}), default_status
