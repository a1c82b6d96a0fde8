from __future__ import annotations

import os
import tempfile

# Configure before any passport module builds its engine or log sinks.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "test"
os.environ["LOG_FILE"] = os.path.join(tempfile.mkdtemp(prefix="passport-tests-"), "passport.log")

from collections.abc import Iterator, Sequence
from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy.engine import Engine

from passport.application.services.password_hashing import WerkzeugPasswordHasher
from passport.domain.users.entities import SessionToken, User
from passport.domain.users.exceptions import (InvalidCredentialsError, MissingUserError,
                                              StoreUnavailableError)
from passport.domain.users.repositories import (PasswordHasher, SessionTokenRepository,
                                                UserRepository)
from passport.infrastructure.db import build_engine, drop_db, init_db

FAST_HASH_METHOD = "pbkdf2:sha256:1000"


class MutableClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    def find_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def add(self, user: User) -> User:
        new_user = replace(user, id=self._seq)
        self._seq += 1
        self._users[new_user.id] = new_user
        return new_user

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        user = self._users.get(user_id)
        if user is None:
            raise MissingUserError()
        self._users[user_id] = replace(user, password_hash=password_hash)

    def remove(self, user_id: int) -> None:
        self._users.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._users)


class InMemoryTokenRepository(SessionTokenRepository):
    def __init__(self, users: InMemoryUserRepository | None = None) -> None:
        self._users = users
        self._tokens: dict[int, SessionToken] = {}
        self._seq = 1
        self.fail_deletes = False

    def find_by_token(self, token: str) -> SessionToken | None:
        return next((t for t in self._tokens.values() if t.token == token), None)

    def list_for_user(self, user_id: int) -> Sequence[SessionToken]:
        return [t for t in self._tokens.values() if t.user_id == user_id]

    def add(self, token: SessionToken) -> SessionToken:
        stored = replace(token, id=self._seq)
        self._seq += 1
        self._tokens[stored.id] = stored
        return stored

    def delete(self, token_id: int) -> None:
        if self.fail_deletes:
            raise StoreUnavailableError()
        self._tokens.pop(token_id, None)

    def delete_for_user(self, user_id: int) -> int:
        doomed = [t.id for t in self._tokens.values() if t.user_id == user_id]
        for token_id in doomed:
            del self._tokens[token_id]
        return len(doomed)

    def replace_for_user(
        self, token: SessionToken, *, expected_password_hash: str | None = None
    ) -> SessionToken:
        if self._users is not None:
            owner = self._users.find_by_id(token.user_id)
            if owner is None:
                raise MissingUserError()
            if expected_password_hash is not None and owner.password_hash != expected_password_hash:
                raise InvalidCredentialsError()
        self.delete_for_user(token.user_id)
        return self.add(token)

    def all(self) -> list[SessionToken]:
        return list(self._tokens.values())


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


@pytest.fixture()
def clock() -> MutableClock:
    return MutableClock(datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tokens(users: InMemoryUserRepository) -> InMemoryTokenRepository:
    return InMemoryTokenRepository(users)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture()
def container(engine: Engine, clock: MutableClock):
    from passport.infrastructure.container import Container

    return Container(
        engine=engine,
        hasher_factory=lambda: WerkzeugPasswordHasher(method=FAST_HASH_METHOD),
        clock=clock,
    )


@pytest.fixture()
def app(container) -> Flask:
    from passport.app import create_app

    return create_app(container)


@pytest.fixture()
def client(app: Flask) -> Iterator[FlaskClient]:
    with app.test_client() as client:
        yield client
