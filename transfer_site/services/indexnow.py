"""
IndexNow client: notifies search engines about new or changed pages.
"""
import asyncio
import logging
from typing import List
from urllib.parse import urlparse

import httpx

from transfer_site.config import settings

logger = logging.getLogger(__name__)

INDEXNOW_SERVERS = (
    "https://www.bing.com/indexnow",
    "https://yandex.com/indexnow",
)
MAX_URLS_PER_REQUEST = 10000


class IndexNowNotConfigured(Exception):
    """Raised when INDEXNOW_KEY is missing."""


def build_payload(urls: List[str]) -> dict:
    key = settings.INDEXNOW_KEY
    return {
        "host": urlparse(settings.BASE_URL).hostname,
        "key": key,
        "urlList": urls[:MAX_URLS_PER_REQUEST],
        "keyLocation": f"{settings.BASE_URL}/api/indexnow?key={key}",
    }


async def _submit(client: httpx.AsyncClient, server: str, payload: dict) -> dict:
    try:
        resp = await client.post(server, params={"key": payload["key"]}, json=payload)
    except httpx.HTTPError as e:
        logger.warning(f"IndexNow submit to {server} failed: {str(e)}")
        return {"server": server, "status": None, "error": str(e)}

    if resp.status_code not in (200, 202):
        logger.warning(f"IndexNow {server} answered HTTP_{resp.status_code} body={resp.text}")
    return {"server": server, "status": resp.status_code, "error": None}


async def submit_urls(urls: List[str]) -> List[dict]:
    """
    Send the URL list to every IndexNow server concurrently.

    Args:
        urls: Absolute page URLs; anything past MAX_URLS_PER_REQUEST is dropped

    Returns:
        list: One {server, status, error} entry per server

    Raises:
        IndexNowNotConfigured: If INDEXNOW_KEY is empty
    """
    if not settings.INDEXNOW_KEY:
        raise IndexNowNotConfigured("INDEXNOW_KEY is not configured")

    payload = build_payload(urls)
    async with httpx.AsyncClient(timeout=10.0) as client:
        results = await asyncio.gather(
            *(_submit(client, server, payload) for server in INDEXNOW_SERVERS)
        )

    logger.info(f"Submitted {len(payload['urlList'])} URLs to IndexNow")
    return list(results)
