# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redaction of credentials from log lines."""

from __future__ import annotations

import re
from typing import Any

_REDACTED = "***REDACTED***"

# Order matters: credential schemes first, the generic header rule last.
SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(bearer\s+)[A-Za-z0-9_\-.+/=]{12,}", re.IGNORECASE), rf"\1{_REDACTED}"),
    (re.compile(r"(basic\s+)[A-Za-z0-9+/=]{8,}", re.IGNORECASE), rf"\1{_REDACTED}"),
    (re.compile(r"\b(token\s*[:=]\s*['\"]?)[A-Za-z0-9_\-.+/=]{12,}"), rf"\1{_REDACTED}"),
    (
        re.compile(r"\b(password(?:_hash)?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.IGNORECASE),
        rf"\1{_REDACTED}",
    ),
    (re.compile(r"\b(scrypt|pbkdf2)(:[^\s'\"]*)?\$[^\s'\"]+"), rf"\1${_REDACTED}"),
    (re.compile(r"(\w+(?:\+\w+)?://[^:/\s]+:)[^@\s]+@"), rf"\1{_REDACTED}@"),
    (re.compile(r"[A-Za-z0-9._%+-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})"), r"***@\1"),
    (re.compile(r"(authorization\s*:\s*['\"]?)[^'\"]{10,}", re.IGNORECASE), rf"\1{_REDACTED}"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    record["message"] = sanitize_message(record["message"])
    return True


__all__ = ["SENSITIVE_PATTERNS", "sanitize_message", "sanitize_record"]
