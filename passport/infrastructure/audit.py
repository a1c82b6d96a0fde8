# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Security audit trail, written to the application log."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from passport.shared.logging import logger

_REDACTED_KEYS = ("password", "token", "digest", "hash", "secret")


class AuditAction(str, Enum):
    REGISTER = "register"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    PASSWORD_CHANGED = "password_changed"


@dataclass(slots=True, frozen=True)
class AuditEvent:
    action: AuditAction
    user_id: int | None = None
    ip_address: str | None = None
    success: bool = True
    details: Mapping[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        line = (
            f"AUDIT {self.action.value} user_id={self.user_id} "
            f"ip={self.ip_address} success={self.success}"
        )
        safe = redact_details(self.details)
        if safe:
            line += f" details={safe}"
        return line


def redact_details(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: "***REDACTED***" if any(word in key.lower() for word in _REDACTED_KEYS) else value
        for key, value in details.items()
    }


def audit_log(
    action: AuditAction,
    user_id: int | None = None,
    ip_address: str | None = None,
    details: Mapping[str, Any] | None = None,
    success: bool = True,
) -> AuditEvent:
    event = AuditEvent(action, user_id, ip_address, success, details or {})
    logger.log("INFO" if success else "WARNING", event.render())
    return event


__all__ = ["AuditAction", "AuditEvent", "audit_log", "redact_details"]
