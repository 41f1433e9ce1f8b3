from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, Iterable

from roster_api.core.roles import Role

if TYPE_CHECKING:
    from roster_api.loaders import Loaders
    from roster_api.repositories.users import UserStore


@dataclass(frozen=True)
class CallerContext:
    """Authenticated caller: identity, role set and domain. Read-only."""

    user_id: str
    roles: FrozenSet[str] = field(default_factory=frozenset)
    domain: str = ""

    @classmethod
    def build(cls, user_id: str, roles: Iterable[str] = (), domain: str | None = None) -> "CallerContext":
        return cls(user_id=str(user_id), roles=frozenset(roles), domain=domain or "")

    @property
    def is_super(self) -> bool:
        return Role.SUPER.value in self.roles


@dataclass
class OperationContext:
    """
    Everything a user operation needs for one request.

    Built once per incoming request; the loaders it carries must not outlive it.
    """

    caller: CallerContext
    store: "UserStore"
    loaders: "Loaders"
