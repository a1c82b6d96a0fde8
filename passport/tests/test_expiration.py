from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from passport.domain.users.entities import SessionToken
from passport.domain.users.expiration import TOKEN_TTL, expiry_of, is_expired

ISSUED = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)


def test_expiry_is_seven_days_after_issuance() -> None:
    assert TOKEN_TTL == timedelta(days=7)
    assert expiry_of(ISSUED) == "2024-03-08T12:00:00.000Z"


def test_expiry_comparison_is_strict() -> None:
    expiry = expiry_of(ISSUED)

    assert is_expired(expiry, ISSUED + TOKEN_TTL) is False
    assert is_expired(expiry, ISSUED + TOKEN_TTL + timedelta(milliseconds=1)) is True
    assert is_expired(expiry, ISSUED) is False


def test_datetime_expiry_is_accepted() -> None:
    assert is_expired(ISSUED, ISSUED + timedelta(seconds=1)) is True
    assert is_expired(ISSUED.replace(tzinfo=None), ISSUED) is False


@pytest.mark.parametrize("stored", ["", "garbage", "2024-03-08", None])
def test_unparseable_expiry_counts_as_expired(stored) -> None:
    assert is_expired(stored, ISSUED) is True


def test_token_reports_its_own_expiry() -> None:
    token = SessionToken(
        id=1,
        user_id=1,
        token="abc",
        issued_at=ISSUED,
        expiration_time=expiry_of(ISSUED),
    )

    assert not token.is_expired(ISSUED + timedelta(days=6))
    assert token.is_expired(ISSUED + timedelta(days=8))
