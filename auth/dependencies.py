"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_auth_workflow`` and ``get_current_user_id``.
Tests swap any of the building blocks through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import AuthError
from auth.jwt import TokenIssuer
from auth.mailer import ResetMailer, ResetNotifier
from auth.service import AuthWorkflow
from config.settings import Settings, get_settings
from database.repository import SqlUserDirectory
from database.session import get_db_session

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer(settings.jwt_secret, settings.jwt_expiry_seconds)


def get_mailer(settings: Settings = Depends(get_settings)) -> ResetNotifier:
    return ResetMailer(settings)


def get_auth_workflow(
    session: AsyncSession = Depends(db_session),
    tokens: TokenIssuer = Depends(get_token_issuer),
    mailer: ResetNotifier = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
) -> AuthWorkflow:
    """One workflow per request, bound to that request's session."""
    return AuthWorkflow(
        directory=SqlUserDirectory(session),
        tokens=tokens,
        mailer=mailer,
        settings=settings,
    )


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    user id (UUID string).
    """
    if credentials is None:
        raise AuthError("Missing Bearer token")
    return tokens.verify(credentials.credentials)
