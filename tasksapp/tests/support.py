"""In-memory fakes and fixed clocks for the session use-case tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from tasksapp.domain.users.entities import User
from tasksapp.domain.users.exceptions import DuplicateIdentityError, StaleIdentityError

TEST_JWT_KEY = "test-signing-key-0123456789abcdef0123456789"
START = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


class FrozenClock:
    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryUserStore:
    """Committed state shared by every unit of work opened on it."""

    def __init__(self) -> None:
        self.rows: dict[str, User] = {}
        self.commits = 0
        self.before_commit: Callable[[], None] | None = None


class InMemoryUserRepository:
    def __init__(self, store: InMemoryUserStore) -> None:
        self._store = store
        self.staged: dict[str, User] = {}
        self.created: set[str] = set()

    def find_one(self, **criteria: str) -> User | None:
        for user in self._store.rows.values():
            if all(getattr(user, field) == value for field, value in criteria.items()):
                return user
        return None

    def create(self, user: User) -> None:
        self.staged[user.id] = user
        self.created.add(user.id)

    def update(self, user: User) -> None:
        if user.id not in self._store.rows:
            raise LookupError(user.id)
        self.staged[user.id] = user


class InMemoryUnitOfWork:
    def __init__(self, store: InMemoryUserStore) -> None:
        self._store = store
        self.users = InMemoryUserRepository(store)

    def __enter__(self) -> InMemoryUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    def commit(self) -> None:
        if self._store.before_commit is not None:
            hook, self._store.before_commit = self._store.before_commit, None
            hook()
        for user in self.users.staged.values():
            stored = self._store.rows.get(user.id)
            if user.id not in self.users.created and (
                stored is None or stored.version != user.version
            ):
                self.rollback()
                raise StaleIdentityError()
            for other in self._store.rows.values():
                if other.id != user.id and (
                    other.email == user.email or other.username == user.username
                ):
                    self.rollback()
                    raise DuplicateIdentityError()
        for user in self.users.staged.values():
            version = 1 if user.id in self.users.created else user.version + 1
            self._store.rows[user.id] = replace(user, version=version)
        self._store.commits += 1
        self.rollback()

    def rollback(self) -> None:
        self.users.staged = {}
        self.users.created = set()


