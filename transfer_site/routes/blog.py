"""
Blog routes.
Public readers see published posts only; admins can list drafts with showAll
and manage posts.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from transfer_site.database import get_db
from transfer_site.models import BlogPost, apply_changes, utcnow
from transfer_site.routes.common import bad_request, get_or_404, not_found, server_error
from transfer_site.schemas import BlogPostCreate, BlogPostResponse, BlogPostUpdate, MessageResponse
from transfer_site.services.slugs import SlugConflictError, ensure_slug_available, resolve_unique_slug
from transfer_site.utils.jwt_auth import optional_admin, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog")

FEATURED_COUNT = 3
SLUG_CONFLICT = "Blog post with this slug already exists"


def _newest_first(query):
    return query.order_by(
        BlogPost.published_at.desc().nulls_last(),
        BlogPost.created_at.desc(),
    )


@router.get("", response_model=List[BlogPostResponse])
async def list_posts(
    show_all: bool = Query(False, alias="showAll"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    """
    List blog posts, newest first.
    showAll includes drafts and is honored only for an admin session.
    """
    try:
        query = _newest_first(select(BlogPost))
        if not (show_all and admin):
            query = query.where(BlogPost.is_published.is_(True))
        if limit:
            query = query.limit(limit)

        result = await db.execute(query)
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Failed to list blog posts: {str(e)}", exc_info=True)
        raise server_error("Failed to retrieve blog posts", e)


@router.get("/featured", response_model=List[BlogPostResponse])
async def featured_posts(db: AsyncSession = Depends(get_db)):
    """The three most recently published posts."""
    result = await db.execute(
        _newest_first(select(BlogPost).where(BlogPost.is_published.is_(True))).limit(FEATURED_COUNT)
    )
    return result.scalars().all()


@router.get("/slug/{slug}", response_model=BlogPostResponse)
async def get_post_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    result = await db.execute(select(BlogPost).where(BlogPost.slug == slug))
    post = result.scalar_one_or_none()
    if post is None or (not post.is_published and not admin):
        raise not_found("Blog post", f"No blog post with slug '{slug}'")
    return post


@router.get("/{post_id}", response_model=BlogPostResponse)
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    post = await get_or_404(db, BlogPost, post_id, "Blog post")
    if not post.is_published and not admin:
        raise not_found("Blog post", f"Blog post ID {post_id} does not exist")
    return post


@router.post("", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: BlogPostCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Create a blog post.

    The slug is derived from the title when omitted, and a taken derived slug
    gets a random numeric suffix. A taken explicit slug is rejected. publishedAt is stamped when the post is created published.

    Raises:
        HTTPException: 400 on slug conflict, 500 if the insert fails
    """
    try:
        slug = await resolve_unique_slug(db, BlogPost, payload.title, payload.slug)
        post = BlogPost(
            title=payload.title,
            slug=slug,
            content=payload.content,
            excerpt=payload.excerpt,
            image_url=payload.image_url,
            is_published=payload.is_published,
            published_at=utcnow() if payload.is_published else None,
        )
        db.add(post)
        await db.commit()
        await db.refresh(post)

        logger.info(f"Created blog post {post.id} ('{post.slug}')")
        return post

    except (SlugConflictError, IntegrityError):
        await db.rollback()
        raise bad_request(SLUG_CONFLICT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating blog post: {str(e)}", exc_info=True)
        await db.rollback()
        raise server_error("Failed to create blog post", e)


@router.put("/{post_id}", response_model=BlogPostResponse)
async def update_post(
    post_id: int,
    payload: BlogPostUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Partially update a blog post.

    An explicit slug already used by another post is rejected. publishedAt is
    stamped on the first publish only; unpublishing keeps it.

    Raises:
        HTTPException: 404 if missing, 400 on slug conflict, 500 on failure
    """
    try:
        post = await get_or_404(db, BlogPost, post_id, "Blog post")
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("slug") and changes["slug"] != post.slug:
            await ensure_slug_available(db, BlogPost, changes["slug"], exclude_id=post.id, entity="Blog post")
        elif "slug" in changes and not changes["slug"]:
            changes.pop("slug")

        apply_changes(post, changes)
        if post.is_published and post.published_at is None:
            post.published_at = utcnow()

        await db.commit()
        await db.refresh(post)

        logger.info(f"Updated blog post {post.id}: {sorted(changes)}")
        return post

    except (SlugConflictError, IntegrityError):
        await db.rollback()
        raise bad_request(SLUG_CONFLICT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating blog post {post_id}: {str(e)}", exc_info=True)
        await db.rollback()
        raise server_error("Failed to update blog post", e)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    post = await get_or_404(db, BlogPost, post_id, "Blog post")
    await db.delete(post)
    await db.commit()

    logger.info(f"Deleted blog post {post_id}")
    return MessageResponse(message="Blog post deleted")
