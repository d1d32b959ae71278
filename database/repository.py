"""
User directory — the only way the auth workflow touches storage.

``UserDirectory`` is the capability set the workflow depends on;
``SqlUserDirectory`` implements it on top of an ``AsyncSession``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import ConflictError
from database.models import User

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    async def find_by_email(self, email: str) -> Optional[User]: ...

    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[User]: ...

    async def find_by_valid_reset_token(self, token: str, now: datetime) -> Optional[User]: ...

    async def create(self, fields: Dict[str, Any]) -> User: ...

    async def save(self, user: User) -> None: ...


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


class SqlUserDirectory:
    """``UserDirectory`` backed by SQLAlchemy.  Commit is left to the session owner."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[User]:
        try:
            uid = _to_uuid(user_id)
        except ValueError:
            return None
        return await self._session.get(User, uid)

    async def find_by_valid_reset_token(self, token: str, now: datetime) -> Optional[User]:
        """Match only a stored *token* whose expiry is strictly after *now*."""
        result = await self._session.execute(
            select(User).where(
                User.reset_password_token == token,
                User.reset_password_expires > now,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, fields: Dict[str, Any]) -> User:
        """Insert a new user.  Raises ``ConflictError`` if the email is taken."""
        user = User(id=uuid.uuid4(), **fields)
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.info("Duplicate registration rejected for %s", fields.get("email"))
            raise ConflictError("User already exists") from exc
        return user

    async def save(self, user: User) -> None:
        """Flush pending changes of *user* in a single UPDATE."""
        self._session.add(user)
        await self._session.flush()
