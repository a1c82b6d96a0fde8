# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""One session, one transaction."""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType

from sqlalchemy.orm import Session

from passport.shared.logging import logger


class SqlAlchemyUnitOfWork:
    """Open a session on enter; commit on clean exit, roll back otherwise.

    The session is always closed, so rows returned from inside the block must
    already be mapped to domain objects.
    """

    __slots__ = ("_session_factory", "_session")

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> Session:
        self._session = self._session_factory()
        return self._session

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        try:
            if exc_type is None:
                session.commit()
            else:
                logger.debug(f"uow: rollback after {exc_type.__name__}")
                session.rollback()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("unit of work is not active")
        return self._session


def unit_of_work_scope(factory: Callable[[], Session]) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(factory)


__all__ = ["SqlAlchemyUnitOfWork", "unit_of_work_scope"]
