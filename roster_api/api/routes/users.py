from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from roster_api.core.context import OperationContext
from roster_api.core.deps import get_caller, get_operation_context
from roster_api.services import users as user_ops
from roster_api.schemas.common import MutationResponse
from roster_api.schemas.users import (
    ChangeRolesArgs,
    CreateStudentArgs,
    MoveToDomainArgs,
    UserCreateStudentInput,
    UserIdArgs,
    UsersQuery,
    UsersResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=UsersResponse,
    summary="Get users",
    description="Resolve users by id. Non-super callers only see users of their own domain.",
)
async def get_users(
    ids: List[str] = Query(default=[]),
    context: OperationContext = Depends(get_operation_context),
) -> UsersResponse:
    return await user_ops.users(UsersQuery(ids=ids), context)


# PUBLIC_INTERFACE
@router.get(
    "/roles",
    response_model=List[str],
    summary="Available roles",
    dependencies=[Depends(get_caller)],
)
def get_available_roles() -> List[str]:
    return user_ops.user_available_roles()


# PUBLIC_INTERFACE
@router.post(
    "/students",
    response_model=MutationResponse,
    summary="Create student",
    description="Create a user holding the student role. Requires admin or super.",
)
async def create_student(
    payload: UserCreateStudentInput,
    context: OperationContext = Depends(get_operation_context),
) -> MutationResponse:
    return await user_ops.user_create_student(CreateStudentArgs(new_user=payload), context)


# PUBLIC_INTERFACE
@router.put(
    "/{user_id}/roles",
    response_model=MutationResponse,
    summary="Change roles",
)
async def change_roles(
    user_id: str = Path(...),
    roles: List[str] = Body(..., embed=True),
    context: OperationContext = Depends(get_operation_context),
) -> MutationResponse:
    return await user_ops.user_change_roles(ChangeRolesArgs(id=user_id, roles=roles), context)


# PUBLIC_INTERFACE
@router.put(
    "/{user_id}/domain",
    response_model=MutationResponse,
    summary="Move user to domain",
)
async def move_to_domain(
    user_id: str = Path(...),
    domain: Optional[str] = Body(None, embed=True),
    context: OperationContext = Depends(get_operation_context),
) -> MutationResponse:
    return await user_ops.user_move_to_domain(MoveToDomainArgs(id=user_id, domain=domain), context)


# PUBLIC_INTERFACE
@router.post(
    "/{user_id}/super",
    response_model=MutationResponse,
    summary="Grant super role",
)
async def set_super_user(
    user_id: str = Path(...),
    context: OperationContext = Depends(get_operation_context),
) -> MutationResponse:
    return await user_ops.user_set_super_user(UserIdArgs(id=user_id), context)


# PUBLIC_INTERFACE
@router.delete(
    "/{user_id}",
    response_model=MutationResponse,
    summary="Delete user",
)
async def delete_user(
    user_id: str = Path(...),
    context: OperationContext = Depends(get_operation_context),
) -> MutationResponse:
    return await user_ops.user_delete_user(UserIdArgs(id=user_id), context)
