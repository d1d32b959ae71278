"""
SQLAlchemy ORM models.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, String, TypeDecorator, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp; naive values read back (SQLite) are tagged UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(
        SAEnum(
            UserRole,
            name="user_role",
            native_enum=False,
            create_constraint=True,
            validate_strings=True,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.USER,
    )
    password = Column(String(255), nullable=False)
    avatar = Column(String(512), nullable=True)
    reset_password_token = Column(String(128), nullable=True, index=True)
    reset_password_expires = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, default=_utcnow)
    updated_at = Column(UTCDateTime, default=_utcnow, onupdate=_utcnow)

    def has_valid_reset_token(self, token: str, now: datetime) -> bool:
        """True while *token* matches the stored one and has not expired."""
        return (
            self.reset_password_token is not None
            and self.reset_password_expires is not None
            and token == self.reset_password_token
            and self.reset_password_expires > now
        )

    def begin_reset(self, token: str, expires: datetime) -> None:
        self.reset_password_token = token
        self.reset_password_expires = expires

    def clear_reset(self) -> None:
        self.reset_password_token = None
        self.reset_password_expires = None
