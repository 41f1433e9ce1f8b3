"""
Public Pydantic schemas used by FastAPI routes, operations, and tests.
"""

from .common import MessageResponse, MutationResponse, OperationResponse  # noqa: F401
from .users import UserRead, UsersResponse  # noqa: F401
