# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database unit of work implementation."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable
from contextlib import AbstractContextManager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tasksapp.domain.users.exceptions import DuplicateIdentityError
from tasksapp.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from tasksapp.shared.errors.base import PersistenceError
from tasksapp.shared.logging import logger

_UNIQUE_VIOLATION_SQLSTATE = "23505"
_SQLITE_UNIQUE_CODES = frozenset(
    {sqlite3.SQLITE_CONSTRAINT_UNIQUE, sqlite3.SQLITE_CONSTRAINT_PRIMARYKEY}
)


def is_unique_violation(exc: IntegrityError) -> bool:
    """Classify by driver error code; message wording varies across backends."""
    orig = exc.orig
    if getattr(orig, "sqlite_errorcode", None) in _SQLITE_UNIQUE_CODES:
        return True
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return sqlstate == _UNIQUE_VIOLATION_SQLSTATE


class SqlAlchemyUnitOfWork(AbstractContextManager):
    """One session per use-case invocation.

    Nothing is written unless ``commit()`` is called; leaving the context
    discards whatever is still staged.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None
        self._users: SqlAlchemyUserRepository | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self._users = SqlAlchemyUserRepository(self._session)
        logger.debug("uow: session opened")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if exc:
                logger.warning(f"uow: rollback due to {exc_type.__name__}")
            elif self._session.new or self._session.dirty or self._session.deleted:
                logger.debug("uow: discarding uncommitted changes")
            self._session.rollback()
        finally:
            self._session.close()
            logger.debug("uow: session closed")
            self._session = None
            self._users = None

    @property
    def session(self) -> Session:
        if self._session is None:
            msg = "UnitOfWork session accessed before entering context"
            raise RuntimeError(msg)
        return self._session

    @property
    def users(self) -> SqlAlchemyUserRepository:
        if self._users is None:
            msg = "UnitOfWork repositories accessed before entering context"
            raise RuntimeError(msg)
        return self._users

    def commit(self) -> None:
        session = self.session
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            if is_unique_violation(exc):
                logger.warning("uow: commit rejected by unique constraint")
                raise DuplicateIdentityError() from exc
            logger.error(f"uow: commit rejected by constraint {type(exc.orig).__name__}")
            raise PersistenceError() from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("uow: commit failed")
            raise PersistenceError() from exc
        logger.debug("uow: committed")

    def rollback(self) -> None:
        if self._session is None:
            return
        self._session.rollback()
        logger.debug("uow: manual rollback")


def unit_of_work_factory(
    session_factory: Callable[[], Session],
) -> Callable[[], SqlAlchemyUnitOfWork]:
    def _factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory)

    return _factory


__all__ = ["SqlAlchemyUnitOfWork", "is_unique_violation", "unit_of_work_factory"]
