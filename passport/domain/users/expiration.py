# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta

from .token_codec import ensure_utc, format_timestamp, parse_timestamp

TOKEN_TTL = timedelta(days=7)


def expiry_of(issued_at: datetime) -> str:
    return format_timestamp(ensure_utc(issued_at) + TOKEN_TTL)


def is_expired(expiry: str | datetime, now: datetime) -> bool:
    """Return True once ``now`` is strictly past ``expiry``.

    An expiry that cannot be parsed counts as expired.
    """
    if isinstance(expiry, datetime):
        expires_at = ensure_utc(expiry)
    else:
        try:
            expires_at = parse_timestamp(expiry)
        except (TypeError, ValueError):
            return True
    return ensure_utc(now) > expires_at


__all__ = ["TOKEN_TTL", "expiry_of", "is_expired"]
