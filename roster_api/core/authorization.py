"""
Role-based gating of operations.

``gate(policy, handler)`` wraps an async ``(args, context)`` handler and refuses
to call it unless the caller holds at least one role of the policy. The check
runs before the handler, so a refused call has no side effects.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, FrozenSet, Iterable, List, TypeVar, Union

from roster_api.core.context import CallerContext
from roster_api.core.errors import AuthorizationError
from roster_api.core.roles import Role

logger = logging.getLogger(__name__)

T = TypeVar("T")
Handler = Callable[[Any, Any], Awaitable[T]]


def _role_name(role: Union[Role, str]) -> str:
    return role.value if isinstance(role, Role) else str(role)


@dataclass(frozen=True)
class RolePolicy:
    """Set of roles, any one of which authorizes an operation."""

    roles: FrozenSet[str]

    @classmethod
    def any_of(cls, *roles: Union[Role, str]) -> "RolePolicy":
        return cls(roles=frozenset(_role_name(r) for r in roles))

    def allows(self, caller_roles: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(caller_roles)


# PUBLIC_INTERFACE
def gate(policy: RolePolicy, handler: Handler) -> Handler:
    """
    Wrap ``handler`` so it only runs for callers satisfying ``policy``.

    The wrapped handler reads the caller from ``context.caller``. Handler results
    and failures pass through unchanged.

    Raises:
        AuthorizationError: when the caller's roles do not intersect the policy.
    """

    @functools.wraps(handler)
    async def _gated(args: Any, context: Any):
        caller: CallerContext = context.caller
        if not policy.allows(caller.roles):
            logger.info(
                "Denied %s for user %s: roles %s not in %s",
                getattr(handler, "__name__", "operation"),
                caller.user_id,
                sorted(caller.roles),
                sorted(policy.roles),
            )
            raise AuthorizationError("Insufficient role")
        return await handler(args, context)

    _gated.policy = policy  # type: ignore[attr-defined]
    return _gated


# PUBLIC_INTERFACE
def requires_any(*roles: Union[Role, str]) -> Callable[[Handler], Handler]:
    """Decorator form of gate() with an any-of policy."""
    policy = RolePolicy.any_of(*roles)

    def _decorator(handler: Handler) -> Handler:
        return gate(policy, handler)

    return _decorator


# PUBLIC_INTERFACE
def scope_filter(items: Iterable[T], caller: CallerContext) -> List[T]:
    """
    Restrict items to the caller's domain unless the caller holds the super role.

    Items are compared on their ``domain`` attribute; a missing domain counts as "".
    """
    if caller.is_super:
        return list(items)
    own = caller.domain or ""
    return [item for item in items if (getattr(item, "domain", None) or "") == own]
