"""
FastAPI dependency helpers: caller extraction and the per-request operation context.
"""
from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from roster_api.core.context import CallerContext, OperationContext
from roster_api.core.logging import domain_var, user_id_var
from roster_api.core.security import caller_from_token
from roster_api.db.session import get_async_session
from roster_api.loaders import create_loaders
from roster_api.repositories.users import UserRepository, UserStore

# Tokens are issued by the platform's login service
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


# PUBLIC_INTERFACE
async def get_caller(token: str = Depends(oauth2_scheme)) -> CallerContext:
    """
    Resolve the CallerContext from the Authorization bearer token.

    Raises:
        HTTPException: 401 if the token is invalid or expired.
    """
    try:
        caller = caller_from_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    domain_var.set(caller.domain or None)
    user_id_var.set(caller.user_id)
    return caller


# PUBLIC_INTERFACE
async def get_user_store(session: AsyncSession = Depends(get_async_session)) -> UserStore:
    """User store bound to the request's database session."""
    return UserRepository(session)


# PUBLIC_INTERFACE
async def get_operation_context(
    caller: CallerContext = Depends(get_caller),
    store: UserStore = Depends(get_user_store),
) -> OperationContext:
    """
    Build the OperationContext for one request.

    Loaders are created here so their caches live exactly as long as the request.
    """
    return OperationContext(caller=caller, store=store, loaders=create_loaders(store))

