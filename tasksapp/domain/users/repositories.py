# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import User


class UserRepository(Protocol):
    def find_one(self, **criteria: str) -> User | None: ...
    def create(self, user: User) -> None: ...
    def update(self, user: User) -> None:
        """Stage ``user`` over the stored row it was read from.

        Raises ``StaleIdentityError`` (here or at commit) when the stored row
        has moved past ``user.version``.
        """
        ...


class UserUnitOfWork(Protocol):
    users: UserRepository

    def __enter__(self) -> UserUnitOfWork: ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
