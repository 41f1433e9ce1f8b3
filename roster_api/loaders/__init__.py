"""
Request-scoped loaders.

Each request gets its own Loaders container so batching windows and caches
never span two callers.

Usage in an operation:
    user = await context.loaders.users.load(user_id)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from roster_api.loaders.batch import BatchLoader

if TYPE_CHECKING:
    from roster_api.db.models.users import User
    from roster_api.repositories.users import UserStore


@dataclass
class Loaders:
    """Container for all loader instances of one request."""

    users: BatchLoader[str, "User"]


# PUBLIC_INTERFACE
def create_loaders(store: "UserStore") -> Loaders:
    """
    Build a fresh set of loaders bound to ``store``.

    Returns:
        Loaders with empty caches.
    """
    return Loaders(users=BatchLoader(store.fetch_by_ids, name="users"))


__all__ = ["BatchLoader", "Loaders", "create_loaders"]
