from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from tasksapp.domain import InvariantViolation, User
from tasksapp.domain.users.results import Availability, SessionFailure
from tasksapp.tests.support import START


def _user(**overrides: object) -> User:
    fields: dict[str, object] = {
        "id": "u-1",
        "name": "Ana",
        "surname": None,
        "email": "ana@x.com",
        "username": "ana1",
        "password_hash": "hash",
        "password_salt": "salt",
    }
    fields.update(overrides)
    return User(**fields)  # type: ignore[arg-type]


def test_user_requires_password_hash() -> None:
    with pytest.raises(InvariantViolation):
        _user(password_hash="")


def test_refresh_token_and_expiry_are_paired() -> None:
    with pytest.raises(InvariantViolation):
        _user(refresh_token="abc")
    with pytest.raises(InvariantViolation):
        _user(refresh_token_expires_at=START)


def test_refresh_expiry_must_be_aware() -> None:
    with pytest.raises(InvariantViolation):
        _user(refresh_token="abc", refresh_token_expires_at=datetime(2025, 3, 1))


def test_with_refresh_token_rejects_past_expiry() -> None:
    with pytest.raises(InvariantViolation) as excinfo:
        _user().with_refresh_token("abc", START, now=START)
    assert excinfo.value.field == "refresh_token_expires_at"


def test_with_refresh_token_returns_new_identity() -> None:
    user = _user()

    rotated = user.with_refresh_token("abc", START + timedelta(days=1), now=START)

    assert user.refresh_token is None
    assert rotated.refresh_token == "abc"
    assert rotated.refresh_token_valid_at(START + timedelta(days=1)) is True
    assert rotated.refresh_token_valid_at(START + timedelta(days=1, microseconds=1)) is False


def test_rotation_keeps_the_version_it_was_read_at() -> None:
    rotated = _user(version=4).with_refresh_token("abc", START + timedelta(days=1), now=START)

    assert rotated.version == 4


def test_conflict_failure_payload() -> None:
    failure = SessionFailure.identity_conflict(Availability.USERNAME_TAKEN)

    assert failure.to_dict() == {
        "title": "Username already registered.",
        "description": "The username provided is already in use, please try another username.",
        "status": 400,
        "conflict": "username_taken",
    }


def test_available_identity_has_no_conflict_failure() -> None:
    with pytest.raises(ValueError):
        SessionFailure.identity_conflict(Availability.BOTH_AVAILABLE)
