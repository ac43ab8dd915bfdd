# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from tasksapp.domain.users.entities import User as DomainUser
from tasksapp.domain.users.exceptions import StaleIdentityError
from tasksapp.domain.users.repositories import UserRepository
from tasksapp.infrastructure.db.models import User
from tasksapp.shared.logging import logger

_LOOKUP_FIELDS = frozenset({"id", "email", "username"})


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        surname=row.surname,
        email=row.email,
        username=row.username,
        password_hash=row.password_hash,
        password_salt=row.password_salt,
        refresh_token=row.refresh_token,
        refresh_token_expires_at=_as_utc(row.refresh_token_expires_at),
        version=row.version,
    )


class SqlAlchemyUserRepository(UserRepository):
    """Stages identity changes on the unit of work's session; never commits."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_one(self, **criteria: str) -> DomainUser | None:
        if not criteria:
            raise ValueError("find_one needs at least one criterion")
        unknown = set(criteria) - _LOOKUP_FIELDS
        if unknown:
            raise ValueError(f"unsupported lookup fields: {sorted(unknown)}")
        stmt = select(User).filter_by(**criteria).limit(1)
        row = self._session.execute(stmt).scalar_one_or_none()
        if not row:
            return None
        return _to_domain(row)

    def create(self, user: DomainUser) -> None:
        row = User(
            id=user.id,
            name=user.name,
            surname=user.surname,
            email=user.email,
            username=user.username,
            password_hash=user.password_hash,
            password_salt=user.password_salt,
            refresh_token=user.refresh_token,
            refresh_token_expires_at=user.refresh_token_expires_at,
            version=1,
        )
        self._session.add(row)

    def update(self, user: DomainUser) -> None:
        """Compare-and-swap on ``version``; password fields are never rewritten."""
        stmt = (
            update(User)
            .where(User.id == user.id, User.version == user.version)
            .values(
                name=user.name,
                surname=user.surname,
                email=user.email,
                username=user.username,
                refresh_token=user.refresh_token,
                refresh_token_expires_at=user.refresh_token_expires_at,
                version=User.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        if result.rowcount == 1:
            return
        if self._session.get(User, user.id) is None:
            raise LookupError(f"identity {user.id} is not stored")
        logger.warning(f"users: version {user.version} of {user.id} is stale")
        raise StaleIdentityError()
