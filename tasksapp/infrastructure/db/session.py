# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Engine and session factories."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tasksapp.shared.config import DatabaseConfig
from tasksapp.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _set_sqlite_pragmas(dbapi_conn, _) -> None:
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA journal_mode=WAL;")
        cur.execute("PRAGMA synchronous=NORMAL;")
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.execute("PRAGMA busy_timeout=30000;")
    finally:
        cur.close()


def build_engine(database: DatabaseConfig) -> Engine:
    url = database.url
    if not url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            future=True,
            pool_pre_ping=True,
            pool_size=database.pool_size,
            max_overflow=database.max_overflow,
            pool_timeout=database.pool_timeout,
        )

    connect_args: dict[str, object] = {
        "check_same_thread": False,
        "timeout": int(database.pool_timeout),
    }
    if _is_memory_sqlite(url):
        # One shared connection, otherwise every checkout sees an empty database.
        engine = create_engine(
            url, echo=False, future=True, connect_args=connect_args, poolclass=StaticPool
        )
    else:
        engine = create_engine(
            url,
            echo=False,
            future=True,
            pool_pre_ping=True,
            pool_size=database.pool_size,
            max_overflow=database.max_overflow,
            pool_timeout=database.pool_timeout,
            connect_args=connect_args,
        )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    from tasksapp.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured")
