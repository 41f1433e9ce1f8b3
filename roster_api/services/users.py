"""
User operations.

Every operation takes ``(args, context)`` where ``context`` is the request's
OperationContext, is gated by an any-of role policy and returns a response
object. Entity lookups go through ``context.loaders.users`` so lookups issued
while resolving one request share a single store round-trip per key.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from roster_api.core.authorization import requires_any, scope_filter
from roster_api.core.context import OperationContext
from roster_api.core.errors import AuthorizationError, NotFoundError
from roster_api.core.roles import Role, available_roles, parse_roles
from roster_api.db.base import new_id
from roster_api.db.models.users import User
from roster_api.loaders import BatchLoader
from roster_api.schemas.common import MutationResponse
from roster_api.schemas.users import (
    ChangeRolesArgs,
    CreateStudentArgs,
    MoveToDomainArgs,
    UserIdArgs,
    UserRead,
    UsersQuery,
    UsersResponse,
)
from roster_api.services.responses import normalize

logger = logging.getLogger(__name__)

ADMINS = (Role.ADMIN, Role.SUPER)


# PUBLIC_INTERFACE
async def lookup_user(loader: BatchLoader[str, User], user_id: Optional[str]) -> Optional[User]:
    """
    Resolve a user through the loader.

    Returns None for an empty id.

    Raises:
        NotFoundError: if no user has this id.
    """
    if not user_id:
        return None
    user = await loader.load(user_id)
    if user is None:
        raise NotFoundError("User not found!")
    return user


# PUBLIC_INTERFACE
async def transform_user(user: User, loader: BatchLoader[str, User], resolve_updater: bool = True) -> UserRead:
    """
    Convert a stored user to its client representation.

    The updater is resolved one level deep through the loader; an updater that
    no longer exists is reported as None.
    """
    updater: Optional[UserRead] = None
    if resolve_updater and user.updated_by:
        try:
            found = await lookup_user(loader, str(user.updated_by))
        except NotFoundError:
            found = None
        if found is not None:
            updater = await transform_user(found, loader, resolve_updater=False)

    return UserRead(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=f"{user.first_name} {user.last_name}",
        email=user.email,
        picture=user.picture or "",
        domain=user.domain or "",
        roles=list(user.roles or []),
        google_id=user.google_id or "",
        updated_at=user.updated_at,
        created_at=user.created_at,
        last_login=user.last_login,
        updater=updater,
    )


# Queries

@normalize(UsersResponse)
@requires_any(Role.ADMIN, Role.SUPER, Role.TEACHER)
async def users(args: UsersQuery, context: OperationContext) -> UsersResponse:
    """Users with the given ids; non-super callers only see their own domain."""
    loader = context.loaders.users
    found = [user for user in await loader.load_many(args.ids) if user is not None]
    visible = scope_filter(found, context.caller)
    transformed = await asyncio.gather(*(transform_user(user, loader) for user in visible))
    return UsersResponse(success=True, users=list(transformed))


def user_available_roles() -> List[str]:
    return available_roles()


# Mutations

@normalize(MutationResponse)
@requires_any(*ADMINS)
async def user_create_student(args: CreateStudentArgs, context: OperationContext) -> MutationResponse:
    new_user = args.new_user
    user = User(
        id=new_id(),
        user_name=new_user.user_name,
        first_name=new_user.first_name,
        last_name=new_user.last_name,
        email=str(new_user.email),
        google_id=new_user.google_id or "",
        domain=new_user.domain or "",
        picture=new_user.picture,
        updated_by=context.caller.user_id,
        roles=[Role.STUDENT.value],
        method="google" if new_user.google_id else "local",
    )
    created = await context.store.insert_one(user)
    logger.info("Created student %s in domain %r", created.id, created.domain)
    return MutationResponse(success=True, nr_affected=1, ids=[str(created.id)])


@normalize(MutationResponse)
@requires_any(*ADMINS)
async def user_change_roles(args: ChangeRolesArgs, context: OperationContext) -> MutationResponse:
    """Replace a user's roles. Only super users may grant the super role."""
    new_roles = parse_roles(args.roles)
    if Role.SUPER in new_roles and not context.caller.is_super:
        raise AuthorizationError(
            "Can't set super admin role when you are not super admin.\n Insufficient credentials."
        )

    matched = await context.store.update_one(
        args.id,
        {"roles": [role.value for role in new_roles], "updated_by": context.caller.user_id},
    )
    if not matched:
        raise NotFoundError("Failed to match user")
    context.loaders.users.clear(args.id)
    return MutationResponse(success=True, nr_affected=matched)


@normalize(MutationResponse)
@requires_any(*ADMINS)
async def user_move_to_domain(args: MoveToDomainArgs, context: OperationContext) -> MutationResponse:
    """
    Move a user to another domain.

    Without a target domain the caller's own domain is used. Callers without
    the super role may only move users into their own domain or out of any
    domain ("").
    """
    caller = context.caller
    domain = args.domain or caller.domain
    if not caller.is_super and domain not in (caller.domain, ""):
        raise AuthorizationError(
            "You don't have privileges to move user to another domain than your own"
        )

    matched = await context.store.update_one(
        args.id, {"domain": domain, "updated_by": caller.user_id}
    )
    if matched < 1:
        raise NotFoundError("User not found!")
    context.loaders.users.clear(args.id)
    return MutationResponse(success=True, nr_affected=matched, ids=[args.id])


@normalize(MutationResponse)
@requires_any(Role.SUPER)
async def user_set_super_user(args: UserIdArgs, context: OperationContext) -> MutationResponse:
    user = await lookup_user(context.loaders.users, args.id)
    if user is None:
        raise NotFoundError("User not found!")

    roles = list(user.roles or [])
    if Role.SUPER.value not in roles:
        roles.append(Role.SUPER.value)
    matched = await context.store.update_one(
        args.id, {"roles": roles, "updated_by": context.caller.user_id}
    )
    if not matched:
        raise NotFoundError("User not found!")
    context.loaders.users.clear(args.id)
    return MutationResponse(success=True, nr_affected=1, ids=[args.id])


@normalize(MutationResponse)
@requires_any(*ADMINS)
async def user_delete_user(args: UserIdArgs, context: OperationContext) -> MutationResponse:
    """Delete a user. Callers without the super role only delete within their own domain."""
    caller = context.caller
    domain = None if caller.is_super else caller.domain
    deleted = await context.store.delete_one(args.id, domain=domain)
    if deleted < 1:
        raise NotFoundError("User not found, could not delete.")
    context.loaders.users.clear(args.id)
    return MutationResponse(success=True, nr_affected=deleted, ids=[args.id])
