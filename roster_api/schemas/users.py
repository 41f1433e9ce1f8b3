from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from .common import OperationResponse


class UserRead(BaseModel):
    """User as returned to clients."""
    id: str = Field(..., description="User ID")
    first_name: str = Field(...)
    last_name: str = Field(...)
    full_name: str = Field(..., description="First and last name joined by a space")
    email: str = Field(...)
    picture: str = Field("", description="Picture URL, empty when unset")
    domain: str = Field("", description="Domain the user belongs to, empty when unset")
    roles: List[str] = Field(default_factory=list, description="Role names held by the user")
    google_id: str = Field("", description="Google account id, empty when unset")
    updated_at: Optional[datetime] = Field(None)
    created_at: Optional[datetime] = Field(None)
    last_login: Optional[datetime] = Field(None)
    updater: Optional["UserRead"] = Field(None, description="User who last updated this user")


class UsersResponse(OperationResponse):
    """Outcome of the users query."""
    users: List[UserRead] = Field(default_factory=list)


class UsersQuery(BaseModel):
    ids: List[str] = Field(default_factory=list, description="User ids to resolve")


class UserCreateStudentInput(BaseModel):
    """Payload for creating a student."""
    user_name: Optional[str] = Field(None)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr = Field(...)
    google_id: Optional[str] = Field(None, description="Google account id; selects the google login method")
    domain: Optional[str] = Field(None)
    picture: Optional[str] = Field(None)


class CreateStudentArgs(BaseModel):
    new_user: UserCreateStudentInput


class ChangeRolesArgs(BaseModel):
    id: str = Field(..., description="User ID")
    roles: List[str] = Field(..., description="Role names replacing the current roles")


class MoveToDomainArgs(BaseModel):
    id: str = Field(..., description="User ID")
    domain: Optional[str] = Field(None, description="Target domain; defaults to the caller's domain")


class UserIdArgs(BaseModel):
    id: str = Field(..., description="User ID")


UserRead.model_rebuild()
