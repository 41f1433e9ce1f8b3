"""Shared fixtures: an in-memory user store and caller/context builders."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

import pytest

from roster_api.core.context import CallerContext, OperationContext
from roster_api.core.errors import ValidationError
from roster_api.db.models.users import User
from roster_api.loaders import create_loaders


def make_user(
    user_id: str,
    *,
    domain: str = "",
    roles: Iterable[str] = ("student",),
    first_name: str = "Ada",
    last_name: str = "Lovelace",
    updated_by: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    return User(
        id=user_id,
        user_name=user_id,
        first_name=first_name,
        last_name=last_name,
        email=email or f"{user_id}@school.edu",
        picture=None,
        domain=domain,
        google_id=None,
        method="local",
        roles=list(roles),
        updated_by=updated_by,
        last_login=None,
    )


class FakeUserStore:
    """In-memory UserStore recording every call."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self.users: Dict[str, User] = {u.id: u for u in users}
        self.fetch_calls: List[List[str]] = []
        self.update_calls: List[tuple] = []
        self.delete_calls: List[tuple] = []
        self.fail_fetch: Optional[Exception] = None

    async def fetch_by_ids(self, ids: Iterable[str]) -> Mapping[str, User]:
        ids = list(ids)
        self.fetch_calls.append(ids)
        if self.fail_fetch is not None:
            raise self.fail_fetch
        return {i: self.users[i] for i in ids if i in self.users}

    async def insert_one(self, user: User) -> User:
        if any(u.email == user.email for u in self.users.values()):
            raise ValidationError("User with this email already exists")
        self.users[user.id] = user
        return user

    async def update_one(self, user_id: str, values: Dict[str, Any]) -> int:
        self.update_calls.append((user_id, dict(values)))
        user = self.users.get(user_id)
        if user is None:
            return 0
        for key, value in values.items():
            setattr(user, key, value)
        return 1

    async def delete_one(self, user_id: str, domain: Optional[str] = None) -> int:
        self.delete_calls.append((user_id, domain))
        user = self.users.get(user_id)
        if user is None or (domain is not None and user.domain != domain):
            return 0
        del self.users[user_id]
        return 1


@pytest.fixture
def store() -> FakeUserStore:
    return FakeUserStore(
        [
            make_user("u-super", domain="", roles=["super"]),
            make_user("u-admin-a", domain="A", roles=["admin"]),
            make_user("u-teacher-a", domain="A", roles=["teacher"]),
            make_user("s1", domain="A", updated_by="u-admin-a"),
            make_user("s2", domain="A", updated_by="u-admin-a"),
            make_user("s3", domain="B", updated_by="u-super"),
        ]
    )


@pytest.fixture
def context_for(store):
    """Build an OperationContext with fresh loaders for a synthetic caller."""

    def _build(user_id: str = "u-admin-a", roles: Iterable[str] = ("admin",), domain: str = "A") -> OperationContext:
        caller = CallerContext.build(user_id, roles=roles, domain=domain)
        return OperationContext(caller=caller, store=store, loaders=create_loaders(store))

    return _build
