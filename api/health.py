"""
Health check endpoint.

Route prefix: /api/v1/health
"""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _status_payload() -> dict:
    return {"status": "online", "message": "Server is up and running."}


@router.get("")
async def health() -> JSONResponse:
    """Report whether the server is up."""
    try:
        return JSONResponse(status_code=200, content=_status_payload())
    except Exception:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=500,
            content={"status": "offline", "message": "Server is not running."},
        )
