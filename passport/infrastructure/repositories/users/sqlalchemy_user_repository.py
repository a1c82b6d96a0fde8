# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from passport.domain.users.entities import SessionToken as DomainSessionToken
from passport.domain.users.entities import User as DomainUser
from passport.domain.users.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    MissingUserError,
    StoreUnavailableError,
)
from passport.domain.users.repositories import SessionTokenRepository, UserRepository
from passport.domain.users.token_codec import ensure_utc
from passport.infrastructure.db.models import Token, User
from passport.infrastructure.unit_of_work import unit_of_work_scope
from passport.shared.logging import logger


@contextmanager
def _store_call(operation: str) -> Iterator[None]:
    """Translate driver and pool failures into ``StoreUnavailableError``."""

    try:
        yield
    except IntegrityError:
        raise
    except (OperationalError, PoolTimeoutError, DBAPIError) as exc:
        logger.error(f"store: {operation} failed ({type(exc).__name__})")
        raise StoreUnavailableError(context={"operation": operation}) from exc


def _to_domain_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        created_at=ensure_utc(row.created_at),
    )


def _to_domain_token(row: Token) -> DomainSessionToken:
    return DomainSessionToken(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        issued_at=ensure_utc(row.issued_at),
        expiration_time=row.expiration_time,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> DomainUser | None:
        with _store_call("users.find_by_email"), unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email).first()
            return _to_domain_user(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with _store_call("users.find_by_id"), unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain_user(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with _store_call("users.add"), unit_of_work_scope(self._session_factory) as session:
                row = User(
                    name=user.name,
                    email=user.email,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain_user(row)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email.
            raise DuplicateEmailError() from exc

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        with _store_call("users.update_password_hash"), unit_of_work_scope(
            self._session_factory
        ) as session:
            updated = (
                session.query(User)
                .filter(User.id == user_id)
                .update({User.password_hash: password_hash}, synchronize_session=False)
            )
            if not updated:
                raise MissingUserError()


class SqlAlchemySessionTokenRepository(SessionTokenRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_token(self, token: str) -> DomainSessionToken | None:
        with _store_call("tokens.find_by_token"), unit_of_work_scope(self._session_factory) as session:
            row = session.query(Token).filter(Token.token == token).first()
            return _to_domain_token(row) if row else None

    def list_for_user(self, user_id: int) -> Sequence[DomainSessionToken]:
        with _store_call("tokens.list_for_user"), unit_of_work_scope(self._session_factory) as session:
            rows = (
                session.query(Token)
                .filter(Token.user_id == user_id)
                .order_by(Token.id.asc())
                .all()
            )
            return [_to_domain_token(row) for row in rows]

    def add(self, token: DomainSessionToken) -> DomainSessionToken:
        try:
            with _store_call("tokens.add"), unit_of_work_scope(self._session_factory) as session:
                row = self._insert(session, token)
                return _to_domain_token(row)
        except IntegrityError as exc:
            raise MissingUserError() from exc

    def delete(self, token_id: int) -> None:
        with _store_call("tokens.delete"), unit_of_work_scope(self._session_factory) as session:
            session.query(Token).filter(Token.id == token_id).delete(synchronize_session=False)

    def delete_for_user(self, user_id: int) -> int:
        with _store_call("tokens.delete_for_user"), unit_of_work_scope(self._session_factory) as session:
            return (
                session.query(Token)
                .filter(Token.user_id == user_id)
                .delete(synchronize_session=False)
            )

    def replace_for_user(
        self, token: DomainSessionToken, *, expected_password_hash: str | None = None
    ) -> DomainSessionToken:
        try:
            with _store_call("tokens.replace_for_user"), unit_of_work_scope(
                self._session_factory
            ) as session:
                # Deleting first takes the write lock on backends without row locks.
                session.query(Token).filter(Token.user_id == token.user_id).delete(
                    synchronize_session=False
                )
                owner = (
                    session.query(User.id, User.password_hash)
                    .filter(User.id == token.user_id)
                    .with_for_update()
                    .one_or_none()
                )
                if owner is None:
                    raise MissingUserError()
                if (
                    expected_password_hash is not None
                    and owner.password_hash != expected_password_hash
                ):
                    # Password changed after the caller verified it; roll back.
                    raise InvalidCredentialsError()
                row = self._insert(session, token)
                return _to_domain_token(row)
        except IntegrityError as exc:
            raise MissingUserError() from exc

    @staticmethod
    def _insert(session: Session, token: DomainSessionToken) -> Token:
        row = Token(
            token=token.token,
            user_id=token.user_id,
            issued_at=token.issued_at,
            expiration_time=token.expiration_time,
        )
        session.add(row)
        session.flush()
        return row
