from __future__ import annotations

from enum import Enum
from typing import Iterable, List

from roster_api.core.errors import ValidationError


class Role(str, Enum):
    """Roles a user may hold. Declaration order is the order exposed to clients."""

    SUPER = "super"
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


# PUBLIC_INTERFACE
def available_roles() -> List[str]:
    """Return every role name in declaration order."""
    return [role.value for role in Role]


# PUBLIC_INTERFACE
def parse_roles(names: Iterable[str]) -> List[Role]:
    """
    Convert role names to Role members, keeping the first occurrence of each.

    Raises:
        ValidationError: if any name is not a known role.
    """
    parsed: List[Role] = []
    for name in names:
        try:
            role = Role(name)
        except ValueError:
            raise ValidationError("Role not valid")
        if role not in parsed:
            parsed.append(role)
    return parsed
