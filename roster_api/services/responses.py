"""
Operation boundary: turns every failure into a response object.

Handlers and the role gate raise typed RosterError subclasses; ``normalize``
is the only place they are caught, so callers always receive a response.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, Type, TypeVar

from roster_api.core.errors import RosterError
from roster_api.schemas.common import MutationResponse, OperationResponse

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=OperationResponse)

UNEXPECTED_MESSAGE = "An unexpected error occurred"


# PUBLIC_INTERFACE
def compose_error_response(exc: BaseException, response_type: Type[R] = MutationResponse) -> R:
    """
    Map a failure to ``response_type(success=False, message=...)``.

    Domain errors keep their message; anything else is logged and reported with
    a generic message so internals do not leak to clients.
    """
    if isinstance(exc, RosterError):
        return response_type.failure(exc.message)
    logger.error("Unexpected failure in operation", exc_info=(type(exc), exc, exc.__traceback__))
    return response_type.failure(UNEXPECTED_MESSAGE)


# PUBLIC_INTERFACE
def normalize(response_type: Type[R]) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """Decorator making an async operation total: failures become failure responses."""

    def _decorator(operation: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        @functools.wraps(operation)
        async def _normalized(*args: Any, **kwargs: Any) -> R:
            try:
                return await operation(*args, **kwargs)
            except Exception as exc:
                return compose_error_response(exc, response_type)

        return _normalized

    return _decorator
