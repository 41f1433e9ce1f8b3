from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from roster_api.db.base import Base, StrUUIDPkMixin, TimestampMixin


class User(StrUUIDPkMixin, TimestampMixin, Base):
    """Platform user. ``domain`` partitions users; ``roles`` holds role names."""
    __tablename__ = "users"

    user_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    first_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    picture: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    domain: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="", index=True)
    google_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    method: Mapped[str] = mapped_column(Text, nullable=False, default="local", server_default="local")
    roles: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    updated_by: Mapped[Optional[str]] = mapped_column(Uuid(as_uuid=False), nullable=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
