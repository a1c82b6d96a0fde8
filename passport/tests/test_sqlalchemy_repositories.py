from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from passport.application.services.session_manager import SessionManager
from passport.domain.users.entities import SessionToken, User
from passport.domain.users.exceptions import (DuplicateEmailError, InvalidCredentialsError,
                                              MissingUserError, StoreUnavailableError)
from passport.domain.users.expiration import expiry_of
from passport.infrastructure.db import build_engine, drop_db, init_db
from passport.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionTokenRepository, SqlAlchemyUserRepository)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def session_factory(engine: Engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def user_repo(session_factory) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(session_factory)


@pytest.fixture()
def token_repo(session_factory) -> SqlAlchemySessionTokenRepository:
    return SqlAlchemySessionTokenRepository(session_factory)


def _user(email: str = "alice@x.com") -> User:
    return User(id=0, name="Alice", email=email, password_hash="digest", created_at=NOW)


def _token(user_id: int, value: str, issued_at: datetime = NOW) -> SessionToken:
    return SessionToken(
        id=0,
        user_id=user_id,
        token=value,
        issued_at=issued_at,
        expiration_time=expiry_of(issued_at),
    )


def test_user_roundtrip(user_repo: SqlAlchemyUserRepository) -> None:
    stored = user_repo.add(_user())

    assert stored.id > 0
    assert stored.created_at == NOW
    assert user_repo.find_by_email("alice@x.com") == stored
    assert user_repo.find_by_id(stored.id) == stored
    assert user_repo.find_by_email("ALICE@x.com") is None
    assert user_repo.find_by_id(stored.id + 100) is None


def test_unique_email_constraint(user_repo: SqlAlchemyUserRepository) -> None:
    user_repo.add(_user())

    with pytest.raises(DuplicateEmailError):
        user_repo.add(_user())

    assert user_repo.add(_user("Alice@x.com")).email == "Alice@x.com"


def test_update_password_hash(user_repo: SqlAlchemyUserRepository) -> None:
    stored = user_repo.add(_user())

    user_repo.update_password_hash(stored.id, "new-digest")

    assert user_repo.find_by_id(stored.id).password_hash == "new-digest"
    with pytest.raises(MissingUserError):
        user_repo.update_password_hash(stored.id + 1, "x")


def test_token_lookup_and_listing(
    user_repo: SqlAlchemyUserRepository, token_repo: SqlAlchemySessionTokenRepository
) -> None:
    alice = user_repo.add(_user())
    first = token_repo.add(_token(alice.id, "first"))
    second = token_repo.add(_token(alice.id, "second", NOW + timedelta(hours=1)))

    assert token_repo.find_by_token("first") == first
    assert token_repo.find_by_token("missing") is None
    assert token_repo.list_for_user(alice.id) == [first, second]
    assert first.issued_at.tzinfo is not None
    assert first.expiration_time == "2024-03-08T12:00:00.000Z"


def test_token_for_unknown_user_is_rejected(
    token_repo: SqlAlchemySessionTokenRepository,
) -> None:
    with pytest.raises(MissingUserError):
        token_repo.add(_token(999, "orphan"))
    with pytest.raises(MissingUserError):
        token_repo.replace_for_user(_token(999, "orphan"))


def test_delete_operations(
    user_repo: SqlAlchemyUserRepository, token_repo: SqlAlchemySessionTokenRepository
) -> None:
    alice = user_repo.add(_user())
    bob = user_repo.add(_user("bob@x.com"))
    one = token_repo.add(_token(alice.id, "one"))
    token_repo.add(_token(alice.id, "two"))
    bobs = token_repo.add(_token(bob.id, "bobs"))

    token_repo.delete(one.id)
    assert token_repo.find_by_token("one") is None

    assert token_repo.delete_for_user(alice.id) == 1
    assert token_repo.delete_for_user(alice.id) == 0
    assert token_repo.list_for_user(bob.id) == [bobs]


def test_replace_for_user_leaves_exactly_one(
    user_repo: SqlAlchemyUserRepository, token_repo: SqlAlchemySessionTokenRepository
) -> None:
    alice = user_repo.add(_user())
    token_repo.add(_token(alice.id, "one"))
    token_repo.add(_token(alice.id, "two"))

    fresh = token_repo.replace_for_user(_token(alice.id, "fresh"))

    assert fresh.id > 0
    assert token_repo.list_for_user(alice.id) == [fresh]


def test_driver_failures_surface_as_store_unavailable() -> None:
    def _down():
        raise OperationalError("SELECT 1", {}, Exception("database is down"))

    users = SqlAlchemyUserRepository(_down)
    tokens = SqlAlchemySessionTokenRepository(_down)

    with pytest.raises(StoreUnavailableError) as excinfo:
        users.find_by_email("alice@x.com")
    with pytest.raises(StoreUnavailableError):
        tokens.delete_for_user(1)

    assert excinfo.value.status == 503
    assert excinfo.value.context == {"operation": "users.find_by_email"}


def test_replace_for_user_rejects_outdated_digest(
    user_repo: SqlAlchemyUserRepository, token_repo: SqlAlchemySessionTokenRepository
) -> None:
    alice = user_repo.add(_user())
    one = token_repo.add(_token(alice.id, "one"))

    with pytest.raises(InvalidCredentialsError):
        token_repo.replace_for_user(_token(alice.id, "late"), expected_password_hash="old")

    assert token_repo.list_for_user(alice.id) == [one]
    fresh = token_repo.replace_for_user(_token(alice.id, "fresh"), expected_password_hash="digest")
    assert token_repo.list_for_user(alice.id) == [fresh]


def test_concurrent_sign_ins_leave_one_live_token(tmp_path: Path) -> None:
    engine = build_engine(f"sqlite:///{tmp_path / 'passport.db'}", pool_size=16, pool_timeout=30)
    init_db(engine)
    try:
        factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        users = SqlAlchemyUserRepository(factory)
        tokens = SqlAlchemySessionTokenRepository(factory)
        sessions = SessionManager(users=users, tokens=tokens, clock=lambda: NOW)
        alice = users.add(_user())

        with ThreadPoolExecutor(max_workers=16) as pool:
            issued = list(pool.map(lambda _: sessions.sign_in(alice), range(64)))

        live = tokens.list_for_user(alice.id)
        assert len(issued) == 64
        assert len(live) == 1
        assert sessions.resolve(live[0].token) == alice
        assert live[0].token in {token.token for token in issued}
    finally:
        drop_db(engine)
        engine.dispose()
