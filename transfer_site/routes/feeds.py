"""
XML feed routes: sitemaps, RSS, Google Merchant feed and robots.txt.
Documents are built in full before responding; a failure yields a JSON 500.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from transfer_site.config import settings
from transfer_site.database import get_db
from transfer_site.models import BlogPost, PhotoGallery, Route, utcnow
from transfer_site.routes.common import not_found, server_error
from transfer_site.services import feeds

logger = logging.getLogger(__name__)

router = APIRouter()

XML_MEDIA_TYPE = "application/xml"
RSS_MEDIA_TYPE = "application/rss+xml"


def _xml(content: str, max_age: int, media_type: str = XML_MEDIA_TYPE) -> Response:
    return Response(
        content=content,
        media_type=f"{media_type}; charset=utf-8",
        headers={"Cache-Control": f"public, max-age={max_age}"},
    )


async def _published_posts(db: AsyncSession, limit: Optional[int] = None):
    query = (
        select(BlogPost)
        .where(BlogPost.is_published.is_(True))
        .order_by(BlogPost.published_at.desc().nulls_last(), BlogPost.created_at.desc())
    )
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def _active_routes(db: AsyncSession):
    result = await db.execute(
        select(Route).where(Route.is_active.is_(True)).order_by(Route.popularity_rating.desc(), Route.id.asc())
    )
    return result.scalars().all()


@router.get("/api/sitemap-index")
async def sitemap_index():
    return _xml(feeds.build_sitemap_index(settings.BASE_URL, utcnow()), max_age=86400)


@router.get("/api/sitemaps/{sitemap_type}")
async def typed_sitemap(sitemap_type: str, db: AsyncSession = Depends(get_db)):
    """
    Per-entity sitemap: blog, gallery or routes.

    Raises:
        HTTPException: 404 for an unknown type, 500 if generation fails
    """
    if sitemap_type not in feeds.SITEMAP_TYPES:
        raise not_found("Sitemap", f"Unknown sitemap type '{sitemap_type}'")

    try:
        if sitemap_type == "blog":
            content = feeds.build_blog_sitemap(await _published_posts(db), settings.BASE_URL)
        elif sitemap_type == "gallery":
            result = await db.execute(
                select(PhotoGallery)
                .options(selectinload(PhotoGallery.photos))
                .where(PhotoGallery.is_published.is_(True))
                .order_by(PhotoGallery.updated_at.desc())
            )
            content = feeds.build_gallery_sitemap(result.scalars().all(), settings.BASE_URL)
        else:
            content = feeds.build_routes_sitemap(await _active_routes(db), settings.BASE_URL)

        return _xml(content, max_age=3600)

    except Exception as e:
        logger.error(f"Error generating {sitemap_type} sitemap: {str(e)}", exc_info=True)
        raise server_error("Failed to generate sitemap", e)


@router.get("/api/feed/rss")
async def rss_feed(db: AsyncSession = Depends(get_db)):
    try:
        posts = await _published_posts(db, limit=feeds.RSS_ITEM_LIMIT)
        content = feeds.build_rss_feed(posts, settings.BASE_URL, utcnow())
        return _xml(content, max_age=1800, media_type=RSS_MEDIA_TYPE)

    except Exception as e:
        logger.error(f"Error generating RSS feed: {str(e)}", exc_info=True)
        raise server_error("Failed to generate RSS feed", e)


@router.get("/api/feed/google-merchant")
async def google_merchant_feed(db: AsyncSession = Depends(get_db)):
    try:
        routes = await _active_routes(db)
        content = feeds.build_merchant_feed(routes, settings.BASE_URL, settings.FEED_CURRENCY)
        return _xml(content, max_age=3600)

    except Exception as e:
        logger.error(f"Error generating Google Merchant feed: {str(e)}", exc_info=True)
        raise server_error("Failed to generate Google Merchant feed", e)


@router.get("/sitemap.xml")
async def pages_sitemap():
    return _xml(feeds.build_pages_sitemap(settings.BASE_URL, utcnow()), max_age=3600)


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt():
    return PlainTextResponse(
        feeds.build_robots_txt(settings.BASE_URL),
        headers={"Cache-Control": "public, max-age=86400"},
    )
