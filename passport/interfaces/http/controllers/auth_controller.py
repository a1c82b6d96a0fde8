# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import TypeVar

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from passport.application.services.authenticator import Authenticator
from passport.application.use_cases.users.change_password import ChangePasswordUseCase
from passport.application.use_cases.users.login_user import LoginUserUseCase
from passport.application.use_cases.users.logout_user import LogoutUserUseCase
from passport.application.use_cases.users.register_user import RegisterUserUseCase
from passport.domain.users.exceptions import InvalidCredentialsError, MissingUserError
from passport.infrastructure.audit import AuditAction, audit_log
from passport.interfaces.http.auth import bearer_required, current_user
from passport.interfaces.http.dto.auth import (ChangePasswordRequestDTO, OkDTO,
                                               RegisterRequestDTO, SignInRequestDTO,
                                               TokenDTO, UserPublicDTO)
from passport.shared.errors import ValidationError as AppValidationError
from passport.shared.errors.validation import raise_validation_error
from passport.shared.middleware.request_logger import client_ip

_DTO = TypeVar("_DTO", bound=BaseModel)


def _parse_body(model: type[_DTO]) -> _DTO:
    payload = request.get_json(silent=True)
    if payload is None:
        if request.get_data(cache=True):
            raise AppValidationError(
                context={"fields": ["body"], "errors": [{"field": "body", "type": "json_invalid"}]}
            )
        payload = {}
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise_validation_error(exc)


def _password_credentials() -> tuple[str | None, str | None]:
    # HTTP Basic wins over a JSON body.
    auth = request.authorization
    if auth is not None and auth.type == "basic":
        return auth.username, auth.password
    dto = _parse_body(SignInRequestDTO)
    return dto.email, dto.password


def _greeting() -> Response:
    return Response(f"Hello, {current_user().name}", mimetype="text/plain")


class AuthController:
    def __init__(
        self,
        *,
        authenticator: Authenticator,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        change_password_use_case: ChangePasswordUseCase,
    ) -> None:
        self._authenticator = authenticator
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._change_password_use_case = change_password_use_case

    def register(self) -> tuple[Response, int]:
        dto = _parse_body(RegisterRequestDTO)
        user = self._register_use_case.execute(dto.name, dto.email, dto.password)

        audit_log(AuditAction.REGISTER, user_id=user.id, ip_address=client_ip())
        body = UserPublicDTO.model_validate(user.to_public_dict())
        return jsonify(body.model_dump()), 201

    def signin(self) -> tuple[Response, int]:
        email, password = _password_credentials()
        try:
            user, token = self._login_use_case.execute(email, password)
        except (MissingUserError, InvalidCredentialsError) as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=client_ip(),
                details={"reason": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, user_id=user.id, ip_address=client_ip())
        return jsonify(TokenDTO(token=token.token).model_dump()), 200

    def me(self) -> Response:
        return _greeting()

    def info(self) -> Response:
        return _greeting()

    def signout(self) -> tuple[Response, int]:
        user = current_user()
        revoked = self._logout_use_case.execute(user)

        audit_log(
            AuditAction.LOGOUT,
            user_id=user.id,
            ip_address=client_ip(),
            details={"revoked": revoked},
        )
        return jsonify(OkDTO().model_dump()), 200

    def change_password(self) -> tuple[Response, int]:
        dto = _parse_body(ChangePasswordRequestDTO)
        user = current_user()
        revoked = self._change_password_use_case.execute(user, dto.password)

        audit_log(
            AuditAction.PASSWORD_CHANGED,
            user_id=user.id,
            ip_address=client_ip(),
            details={"revoked": revoked},
        )
        return jsonify(OkDTO().model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        authed = bearer_required(self._authenticator)

        bp = Blueprint("passport", __name__)
        bp.add_url_rule("/users", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/signin", view_func=self.signin, methods=["POST"])
        bp.add_url_rule("/me", view_func=authed(self.me), methods=["GET"])
        bp.add_url_rule("/info", view_func=authed(self.info), methods=["GET", "POST", "PUT"])
        bp.add_url_rule("/signout", view_func=authed(self.signout), methods=["DELETE"])
        bp.add_url_rule(
            "/users/me/password", view_func=authed(self.change_password), methods=["PUT"]
        )
        return bp
