from __future__ import annotations

import pytest

from tasksapp.application.services.uniqueness import check_availability
from tasksapp.domain.users.entities import User
from tasksapp.domain.users.results import Availability
from tasksapp.tests.support import InMemoryUserRepository, InMemoryUserStore


def _seed(store: InMemoryUserStore, user_id: str, email: str, username: str) -> None:
    store.rows[user_id] = User(
        id=user_id,
        name="Seed",
        surname=None,
        email=email,
        username=username,
        password_hash="hash",
        password_salt="salt",
    )


@pytest.fixture()
def users(store: InMemoryUserStore) -> InMemoryUserRepository:
    _seed(store, "1", "ana@x.com", "ana1")
    _seed(store, "2", "bia@x.com", "bia1")
    return InMemoryUserRepository(store)


@pytest.mark.parametrize(
    ("email", "username", "expected"),
    [
        ("new@x.com", "new1", Availability.BOTH_AVAILABLE),
        ("ana@x.com", "new1", Availability.EMAIL_TAKEN),
        ("new@x.com", "ana1", Availability.USERNAME_TAKEN),
        ("ana@x.com", "ana1", Availability.BOTH_TAKEN),
        ("ana@x.com", "bia1", Availability.BOTH_TAKEN),
    ],
)
def test_check_availability(
    users: InMemoryUserRepository, email: str, username: str, expected: Availability
) -> None:
    assert check_availability(users, email, username) is expected


def test_email_match_is_exact(users: InMemoryUserRepository) -> None:
    assert check_availability(users, "ANA@x.com", "new1") is Availability.BOTH_AVAILABLE
