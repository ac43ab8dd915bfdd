# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tasksapp.domain.users.repositories import UserRepository
from tasksapp.domain.users.results import Availability


def check_availability(users: UserRepository, email: str, username: str) -> Availability:
    """Classify an (email, username) pair against the registered identities.

    Both conflicts are reported when both fields are taken, possibly by two
    different identities.
    """
    email_taken = users.find_one(email=email) is not None
    username_taken = users.find_one(username=username) is not None
    return Availability.classify(email_taken=email_taken, username_taken=username_taken)


__all__ = ["check_availability"]
