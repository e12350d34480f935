"""
Admin session routes.
Login issues a JWT stored in an httpOnly cookie (also returned in the body for
Bearer use); logout clears the cookie.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from transfer_site.config import settings
from transfer_site.schemas import LoginRequest, MessageResponse, SessionResponse, TokenResponse
from transfer_site.utils.jwt_auth import COOKIE_NAME, authenticate_user, create_access_token, optional_admin
from transfer_site.utils.rate_limit import RATE_LIMITS, limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=TokenResponse)
@limiter.limit(RATE_LIMITS["login"])
async def login(request: Request, response: Response, credentials: LoginRequest):
    """
    Exchange the admin credential pair for a session token.

    Raises:
        HTTPException: 401 on wrong credentials, 429 when rate limited
    """
    claims = authenticate_user(credentials.username, credentials.password)
    token = create_access_token(claims)
    max_age = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=not settings.is_development,
        samesite="lax",
        path="/",
    )

    logger.info(f"Admin login succeeded for '{credentials.username}'")
    return TokenResponse(access_token=token, expires_in=max_age)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    response.delete_cookie(key=COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out")


@router.get("/session", response_model=SessionResponse)
async def get_session(admin: Optional[dict] = Depends(optional_admin)):
    if not admin:
        return SessionResponse(authenticated=False)
    return SessionResponse(authenticated=True, username=admin.get("sub"), role=admin.get("role"))
