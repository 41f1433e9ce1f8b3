"""
ORM models.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .users import User  # noqa: F401
