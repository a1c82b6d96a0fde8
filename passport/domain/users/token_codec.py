# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Opaque bearer token generation and the fixed expiry timestamp format.

Timestamps are rendered as ``yyyy-MM-ddTHH:mm:ss.SSSZ`` in UTC with millisecond
precision, so ``parse_timestamp(format_timestamp(t)) == t`` for any UTC instant
that has no sub-millisecond part.
"""

from __future__ import annotations

import base64
import re
import secrets
from datetime import UTC, datetime

from .exceptions import TokenGenerationError

TOKEN_BYTES = 16

_TIMESTAMP_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})\.(?P<millis>\d{3})Z$"
)


def new_opaque_token() -> str:
    try:
        raw = secrets.token_bytes(TOKEN_BYTES)
    except (NotImplementedError, OSError) as exc:
        raise TokenGenerationError() from exc
    return base64.b64encode(raw).decode("ascii")


def ensure_utc(value: datetime) -> datetime:
    # Naive datetimes coming back from the store are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    value = ensure_utc(value)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def parse_timestamp(value: str) -> datetime:
    match = _TIMESTAMP_RE.match(value)
    if match is None:
        raise ValueError(f"not an expiry timestamp: {value!r}")
    parts = {key: int(number) for key, number in match.groupdict().items()}
    return datetime(
        parts["year"],
        parts["month"],
        parts["day"],
        parts["hour"],
        parts["minute"],
        parts["second"],
        parts["millis"] * 1000,
        tzinfo=UTC,
    )


__all__ = [
    "TOKEN_BYTES",
    "ensure_utc",
    "format_timestamp",
    "new_opaque_token",
    "parse_timestamp",
]
