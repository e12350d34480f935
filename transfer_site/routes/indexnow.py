"""
IndexNow routes: key verification for search engines and an admin endpoint
to announce changed URLs.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from transfer_site.config import settings
from transfer_site.routes.common import not_found, server_error
from transfer_site.schemas import IndexNowRequest, IndexNowResponse, IndexNowServerResult
from transfer_site.services.indexnow import MAX_URLS_PER_REQUEST, IndexNowNotConfigured, submit_urls
from transfer_site.utils.jwt_auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/indexnow")


@router.get("", response_class=PlainTextResponse)
async def verify_key(key: Optional[str] = Query(None)):
    """Echo the IndexNow key as text/plain when it matches; 404 otherwise."""
    if not settings.INDEXNOW_KEY or key != settings.INDEXNOW_KEY:
        raise not_found("Key", "IndexNow key does not match")
    return PlainTextResponse(key)


@router.post("", response_model=IndexNowResponse)
async def notify_search_engines(
    payload: IndexNowRequest,
    admin: dict = Depends(require_admin),
):
    """
    Submit page URLs to the IndexNow servers (at most 10000 per call).

    Raises:
        HTTPException: 503 if no key is configured, 500 on unexpected failure
    """
    try:
        results = await submit_urls(payload.urls)
        return IndexNowResponse(
            success=all(result["error"] is None for result in results),
            submitted=min(len(payload.urls), MAX_URLS_PER_REQUEST),
            results=[IndexNowServerResult(**result) for result in results],
        )

    except IndexNowNotConfigured as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "IndexNow not configured", "detail": str(e)},
        )
    except Exception as e:
        logger.error(f"Error sending IndexNow requests: {str(e)}", exc_info=True)
        raise server_error("Error sending IndexNow requests", e)
