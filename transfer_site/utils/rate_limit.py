"""
Rate limiting utilities for API endpoints.
Uses slowapi to prevent brute force attacks on the admin login and abuse of
the public lead forms.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request


def get_client_identifier(request: Request) -> str:
    """
    Get client identifier for rate limiting.
    Uses forwarded IP if behind proxy, otherwise remote address.

    Args:
        request: FastAPI request object

    Returns:
        str: Client identifier (IP address)
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First IP in chain is the original client
        return forwarded.split(",")[0].strip()

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri="memory://"  # In-memory storage; switch to Redis when running several workers
)


RATE_LIMITS = {
    "login": "5/minute",
    "lead": "20/hour",
    "upload": "60/hour",
}
