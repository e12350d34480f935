"""
JWT session tokens for admin access.
Provides token generation, verification and FastAPI dependencies that gate
mutating endpoints.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, status, Header, Request
from jose import JWTError, jwt

from transfer_site.config import settings
from transfer_site.utils.auth import verify_admin_credentials


ALGORITHM = "HS256"
COOKIE_NAME = "admin_token"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary of claims to include in token
        expires_delta: Optional custom expiration time

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": "access"
    })

    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> dict:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token string

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: 401 if token is invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid token", "detail": "Authentication token is invalid or expired"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != "access" or payload.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid token type", "detail": "Token is not an admin access token"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


def _extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    # httpOnly cookie first, Authorization header as fallback
    token = request.cookies.get(COOKIE_NAME)
    if not token and authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            token = parts[1]
    return token


def require_admin(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token (fallback to cookie)")
) -> dict:
    """
    FastAPI dependency for admin-only endpoints.

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    token = _extract_token(request, authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Missing token", "detail": "Authentication required"},
            headers={"WWW-Authenticate": "Bearer"}
        )
    return verify_token(token)


def optional_admin(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token (fallback to cookie)")
) -> Optional[dict]:
    """
    FastAPI dependency for public endpoints with admin extras (e.g. showAll).
    Returns the token payload for a valid admin session, None otherwise.
    """
    token = _extract_token(request, authorization)
    if not token:
        return None
    try:
        return verify_token(token)
    except HTTPException:
        return None


def authenticate_user(username: str, password: str) -> dict:
    """
    Authenticate the admin and return token claims.

    Raises:
        HTTPException: 401 if credentials are invalid, 500 if not configured
    """
    try:
        valid = verify_admin_credentials(username, password)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Authentication not configured", "detail": str(e)}
        )

    if not valid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Invalid credentials", "detail": "Incorrect username or password"}
        )

    return {
        "role": "admin",
        "sub": username,
    }
