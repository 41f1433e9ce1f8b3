from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster_api.core.errors import FetchError, ValidationError
from roster_api.db.models.users import User

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    """Persistence operations the user operations depend on."""

    async def fetch_by_ids(self, ids: Iterable[str]) -> Mapping[str, User]: ...

    async def insert_one(self, user: User) -> User: ...

    async def update_one(self, user_id: str, values: Dict[str, Any]) -> int: ...

    async def delete_one(self, user_id: str, domain: Optional[str] = None) -> int: ...


def _canonical(raw: Any) -> Optional[str]:
    """Canonical UUID string for `raw`, or None when it cannot match a row."""
    try:
        return str(uuid.UUID(str(raw)))
    except ValueError:
        logger.debug("Ignoring malformed user id %r", raw)
        return None


class UserRepository:
    """SQLAlchemy implementation of UserStore over one request's AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def fetch_by_ids(self, ids: Iterable[str]) -> Mapping[str, User]:
        """
        Bulk-load users by id.

        Returns:
            Mapping of requested id to user for the ids that exist. Ids are
            matched in their canonical UUID form and reported under the key
            the caller used.
        """
        canonical: Dict[str, List[str]] = {}
        for raw in ids:
            key = _canonical(raw)
            if key is not None:
                canonical.setdefault(key, []).append(raw)
        if not canonical:
            return {}
        stmt = select(User).where(User.id.in_(list(canonical)))
        try:
            rows = list((await self.session.execute(stmt)).scalars())
        except SQLAlchemyError as exc:
            raise FetchError("Failed to load users") from exc
        return {raw: user for user in rows for raw in canonical[str(user.id)]}

    async def insert_one(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise ValidationError("User with this email already exists") from exc
        await self.session.refresh(user)
        return user

    async def update_one(self, user_id: str, values: Dict[str, Any]) -> int:
        """Update one user; returns the number of matched rows."""
        key = _canonical(user_id)
        if key is None:
            return 0
        stmt = (
            update(User)
            .where(User.id == key)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)

    async def delete_one(self, user_id: str, domain: Optional[str] = None) -> int:
        """
        Delete one user; returns the number of deleted rows.

        When ``domain`` is given the user is only deleted if it belongs to that
        domain. None means no domain condition at all.
        """
        key = _canonical(user_id)
        if key is None:
            return 0
        stmt = delete(User).where(User.id == key)
        if domain is not None:
            stmt = stmt.where(User.domain == domain)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)
