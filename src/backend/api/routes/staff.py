"""
Staff session endpoints.

A correct password yields a signed, expiring session token in an HTTP-only
cookie; that cookie is the staff capability checked by api.deps.require_staff.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response

from api.deps import get_app_settings, is_staff
from core.config import Settings
from core.exceptions import UnauthorizedError
from core.security import create_staff_token, verify_staff_password
from schemas.auth import StaffLoginRequest, StaffSessionResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/login", response_model=StaffSessionResponse)
async def staff_login(
    credentials: StaffLoginRequest,
    response: Response,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> StaffSessionResponse:
    if not verify_staff_password(credentials.password.strip(), settings):
        logger.warning("staff_login_failed")
        raise UnauthorizedError()

    response.set_cookie(
        settings.STAFF_COOKIE_NAME,
        create_staff_token(settings),
        max_age=settings.STAFF_SESSION_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
    )
    logger.info("staff_login")
    return StaffSessionResponse(staff=True)


@router.post("/logout", response_model=StaffSessionResponse)
async def staff_logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> StaffSessionResponse:
    response.delete_cookie(settings.STAFF_COOKIE_NAME)
    return StaffSessionResponse(staff=False)


@router.get("/session", response_model=StaffSessionResponse)
async def staff_session(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> StaffSessionResponse:
    return StaffSessionResponse(staff=is_staff(request, settings))
