# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Engine construction and schema bootstrap."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from passport.shared.config import load_config
from passport.shared.logging import logger

_config = load_config()
_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


class Base(DeclarativeBase):
    """Declarative base for ORM models."""


def build_engine(
    url: str,
    *,
    pool_size: int = 10,
    max_overflow: int = 5,
    pool_timeout: float = 30.0,
) -> Engine:
    """Create an engine whose every call is bounded by ``pool_timeout`` seconds."""

    if url in _MEMORY_URLS:
        # One shared connection, otherwise each checkout sees an empty database.
        engine = create_engine(
            url,
            future=True,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        connect_args: dict[str, object] = {}
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False, "timeout": int(pool_timeout)}
        elif url.startswith("postgresql"):
            connect_args = {
                "connect_timeout": int(pool_timeout),
                "options": f"-c statement_timeout={int(pool_timeout * 1000)}",
            }
        engine = create_engine(
            url,
            echo=False,
            future=True,
            pool_pre_ping=True,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            connect_args=connect_args,
        )

    if url.startswith("sqlite"):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def _set_sqlite_pragmas(dbapi_conn, _):
    """Apply safety PRAGMAs when using SQLite."""

    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute("PRAGMA busy_timeout=30000;")
    except Exception:
        logger.exception("Failed to apply SQLite PRAGMAs")
    finally:
        cur.close()


ENGINE: Engine = build_engine(
    _config.database.url,
    pool_size=_config.database.pool_size,
    max_overflow=_config.database.max_overflow,
    pool_timeout=_config.database.pool_timeout,
)


def init_db(engine: Engine | None = None) -> None:
    """Ensure database schema exists."""

    # Register the mapped tables on Base.metadata.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine or ENGINE)
    logger.info("Database schema ensured")


def drop_db(engine: Engine | None = None) -> None:
    """Drop every table created by ``init_db``."""

    from . import models  # noqa: F401

    Base.metadata.drop_all(bind=engine or ENGINE)
    logger.info("Database schema dropped")
