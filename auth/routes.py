"""
Auth API routes — register, login, password reset.

Route prefix: /api/v1/auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from auth.dependencies import get_auth_workflow
from auth.password import MAX_PASSWORD_BYTES
from auth.service import AuthWorkflow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────
# Fields are optional here; emptiness is checked by the workflow so every
# missing-field case produces the same 400 envelope.


class RegisterRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, alias="firstName", max_length=128)
    last_name: Optional[str] = Field(default=None, alias="lastName", max_length=128)
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=MAX_PASSWORD_BYTES)

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ResetRequest(BaseModel):
    email: Optional[str] = None


class ConfirmResetRequest(BaseModel):
    new_password: Optional[str] = Field(default=None, alias="newPassword", max_length=MAX_PASSWORD_BYTES)

    model_config = {"populate_by_name": True}


class AuthResponse(BaseModel):
    id: str
    token: str


class MessageResponse(BaseModel):
    message: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    workflow: AuthWorkflow = Depends(get_auth_workflow),
) -> Dict[str, Any]:
    """Register a new user."""
    return await workflow.register(req.first_name, req.last_name, req.email, req.password)


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    workflow: AuthWorkflow = Depends(get_auth_workflow),
) -> Dict[str, Any]:
    """Login with email + password."""
    return await workflow.login(req.email, req.password)


@router.post("/reset", response_model=MessageResponse)
async def request_reset(
    req: ResetRequest,
    workflow: AuthWorkflow = Depends(get_auth_workflow),
) -> Dict[str, Any]:
    """Email a password-reset token."""
    return await workflow.request_reset(req.email)


@router.post("/reset/{token}", response_model=MessageResponse)
async def confirm_reset(
    token: str,
    req: ConfirmResetRequest,
    workflow: AuthWorkflow = Depends(get_auth_workflow),
) -> Dict[str, Any]:
    """Set a new password using a reset token."""
    return await workflow.confirm_reset(token, req.new_password)
