"""
Photo gallery routes.
Galleries own an ordered list of photos; public readers see published
galleries only.
"""
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from transfer_site.database import get_db
from transfer_site.models import GalleryPhoto, PhotoGallery, apply_changes
from transfer_site.routes.common import bad_request, get_or_404, not_found, server_error
from transfer_site.schemas import (
    GalleryCreate,
    GalleryDetailResponse,
    GalleryListItem,
    GalleryResponse,
    GalleryUpdate,
    MessageResponse,
    PhotoBatchCreate,
    PhotoBatchError,
    PhotoBatchResult,
    PhotoCreate,
    PhotoReorderRequest,
    PhotoResponse,
    PhotoUpdate,
    validate_http_url,
)
from transfer_site.services.slugs import SlugConflictError, ensure_slug_available
from transfer_site.utils.jwt_auth import optional_admin, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/galleries")

SLUG_CONFLICT = "gallery with this slug already exists"


async def _load_gallery(db: AsyncSession, gallery_id: int) -> PhotoGallery:
    result = await db.execute(
        select(PhotoGallery)
        .options(selectinload(PhotoGallery.photos))
        .where(PhotoGallery.id == gallery_id)
    )
    gallery = result.scalar_one_or_none()
    if gallery is None:
        raise not_found("Gallery", f"Gallery ID {gallery_id} does not exist")
    return gallery


async def _next_photo_order(db: AsyncSession, gallery_id: int) -> int:
    result = await db.execute(
        select(func.max(GalleryPhoto.order)).where(GalleryPhoto.gallery_id == gallery_id)
    )
    current = result.scalar()
    return 0 if current is None else current + 1


def _url_errors(url: str) -> Optional[Dict[str, str]]:
    try:
        validate_http_url(url)
    except ValidationError as e:
        return {"url": e.errors()[0]["msg"]}
    return None


# --- Galleries --------------------------------------------------------------

@router.get("", response_model=List[GalleryListItem])
async def list_galleries(
    show_all: bool = Query(False, alias="showAll"),
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    """
    List galleries newest first, each with its first photo and photo count.
    showAll includes drafts for an admin session.
    """
    try:
        query = (
            select(PhotoGallery)
            .options(selectinload(PhotoGallery.photos))
            .order_by(PhotoGallery.created_at.desc(), PhotoGallery.id.desc())
        )
        if not (show_all and admin):
            query = query.where(PhotoGallery.is_published.is_(True))

        result = await db.execute(query)
        galleries = result.scalars().all()

        items = []
        for gallery in galleries:
            item = GalleryListItem.model_validate(gallery)
            item.photo_count = len(gallery.photos)
            item.cover_photo = PhotoResponse.model_validate(gallery.photos[0]) if gallery.photos else None
            items.append(item)
        return items

    except Exception as e:
        logger.error(f"Failed to list galleries: {str(e)}", exc_info=True)
        raise server_error("Failed to retrieve galleries", e)


@router.post("", response_model=GalleryResponse, status_code=status.HTTP_201_CREATED)
async def create_gallery(
    payload: GalleryCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Create a gallery. Galleries require an explicit slug; a taken slug is rejected.

    Raises:
        HTTPException: 400 if the slug is taken, 500 if the insert fails
    """
    try:
        await ensure_slug_available(db, PhotoGallery, payload.slug, entity="Gallery")

        gallery = PhotoGallery(**payload.model_dump())
        db.add(gallery)
        await db.commit()
        await db.refresh(gallery)

        logger.info(f"Created gallery {gallery.id} ('{gallery.slug}')")
        return gallery

    except (SlugConflictError, IntegrityError):
        await db.rollback()
        raise bad_request(SLUG_CONFLICT)
    except Exception as e:
        logger.error(f"Error creating gallery: {str(e)}", exc_info=True)
        await db.rollback()
        raise server_error("Failed to create gallery", e)


@router.get("/slug/{slug}", response_model=GalleryDetailResponse)
async def get_gallery_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    result = await db.execute(
        select(PhotoGallery)
        .options(selectinload(PhotoGallery.photos))
        .where(PhotoGallery.slug == slug)
    )
    gallery = result.scalar_one_or_none()
    if gallery is None or (not gallery.is_published and not admin):
        raise not_found("Gallery", f"No gallery with slug '{slug}'")
    return gallery


# --- Single photos ----------------------------------------------------------

@router.get("/photos/{photo_id}", response_model=PhotoResponse)
async def get_photo(
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    photo = await get_or_404(db, GalleryPhoto, photo_id, "Photo")
    if not admin:
        gallery = await db.get(PhotoGallery, photo.gallery_id)
        if gallery is None or not gallery.is_published:
            raise not_found("Photo", f"Photo ID {photo_id} does not exist")
    return photo


@router.patch("/photos/{photo_id}", response_model=PhotoResponse)
async def update_photo(
    photo_id: int,
    payload: PhotoUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    photo = await get_or_404(db, GalleryPhoto, photo_id, "Photo")
    apply_changes(photo, payload.model_dump(exclude_unset=True))
    await db.commit()
    await db.refresh(photo)

    logger.info(f"Updated photo {photo_id}")
    return photo


@router.delete("/photos/{photo_id}", response_model=MessageResponse)
async def delete_photo(
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    photo = await get_or_404(db, GalleryPhoto, photo_id, "Photo")
    await db.delete(photo)
    await db.commit()

    logger.info(f"Deleted photo {photo_id}")
    return MessageResponse(message="Photo deleted")


# --- Gallery by id ----------------------------------------------------------

@router.get("/{gallery_id}", response_model=GalleryDetailResponse)
async def get_gallery(
    gallery_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    gallery = await _load_gallery(db, gallery_id)
    if not gallery.is_published and not admin:
        raise not_found("Gallery", f"Gallery ID {gallery_id} does not exist")
    return gallery


@router.patch("/{gallery_id}", response_model=GalleryResponse)
async def update_gallery(
    gallery_id: int,
    payload: GalleryUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Partially update a gallery. A new slug must not belong to another gallery.

    Raises:
        HTTPException: 404 if missing, 400 on slug conflict
    """
    try:
        gallery = await get_or_404(db, PhotoGallery, gallery_id, "Gallery")
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("slug") and changes["slug"] != gallery.slug:
            await ensure_slug_available(db, PhotoGallery, changes["slug"], exclude_id=gallery.id, entity="Gallery")

        apply_changes(gallery, changes)
        await db.commit()
        await db.refresh(gallery)

        logger.info(f"Updated gallery {gallery_id}: {sorted(changes)}")
        return gallery

    except (SlugConflictError, IntegrityError):
        await db.rollback()
        raise bad_request(SLUG_CONFLICT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating gallery {gallery_id}: {str(e)}", exc_info=True)
        await db.rollback()
        raise server_error("Failed to update gallery", e)


@router.delete("/{gallery_id}", response_model=MessageResponse)
async def delete_gallery(
    gallery_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Delete a gallery together with all of its photos."""
    await get_or_404(db, PhotoGallery, gallery_id, "Gallery")

    # Photos are removed explicitly; SQLite does not enforce the FK cascade by default
    photos = await db.execute(delete(GalleryPhoto).where(GalleryPhoto.gallery_id == gallery_id))
    await db.execute(delete(PhotoGallery).where(PhotoGallery.id == gallery_id))
    await db.commit()

    logger.info(f"Deleted gallery {gallery_id} and {photos.rowcount} photo(s)")
    return MessageResponse(message="Gallery deleted")


# --- Gallery photos ---------------------------------------------------------

@router.get("/{gallery_id}/photos", response_model=List[PhotoResponse])
async def list_photos(
    gallery_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    gallery = await get_or_404(db, PhotoGallery, gallery_id, "Gallery")
    if not gallery.is_published and not admin:
        raise not_found("Gallery", f"Gallery ID {gallery_id} does not exist")
    result = await db.execute(
        select(GalleryPhoto)
        .where(GalleryPhoto.gallery_id == gallery_id)
        .order_by(GalleryPhoto.order.asc(), GalleryPhoto.id.asc())
    )
    return result.scalars().all()


@router.post("/{gallery_id}/photos", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
async def add_photo(
    gallery_id: int,
    payload: PhotoCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Add one photo; without an explicit order it goes after the current last photo."""
    await get_or_404(db, PhotoGallery, gallery_id, "Gallery")

    order = payload.order if payload.order is not None else await _next_photo_order(db, gallery_id)
    photo = GalleryPhoto(
        url=payload.url,
        title=payload.title,
        description=payload.description,
        order=order,
        gallery_id=gallery_id,
    )
    db.add(photo)
    await db.commit()
    await db.refresh(photo)

    logger.info(f"Added photo {photo.id} to gallery {gallery_id} at order {order}")
    return photo


@router.post("/{gallery_id}/photos/batch", response_model=PhotoBatchResult, status_code=status.HTTP_201_CREATED)
async def add_photos_batch(
    gallery_id: int,
    payload: PhotoBatchCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Add several photos by URL.

    Each URL is validated on its own. Valid URLs are inserted together after
    the gallery's current last photo; invalid ones are reported by input index.
    When nothing is valid the request fails with every error listed.

    Returns:
        PhotoBatchResult: created photos and per-index errors

    Raises:
        HTTPException: 404 if the gallery is missing, 400 if no URL is valid
    """
    await get_or_404(db, PhotoGallery, gallery_id, "Gallery")

    valid_urls = []
    errors = []
    for index, url in enumerate(payload.urls):
        url_errors = _url_errors(url)
        if url_errors:
            errors.append(PhotoBatchError(index=index, url=url, errors=url_errors))
        else:
            valid_urls.append(url)

    if not valid_urls:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Validation error",
                "details": [error.model_dump(by_alias=True) for error in errors],
            },
        )

    try:
        start = await _next_photo_order(db, gallery_id)
        photos = [
            GalleryPhoto(url=url, order=start + offset, gallery_id=gallery_id)
            for offset, url in enumerate(valid_urls)
        ]
        db.add_all(photos)
        await db.flush()
        for photo in photos:
            await db.refresh(photo)
        await db.commit()

    except Exception as e:
        logger.error(f"Error adding photos to gallery {gallery_id}: {str(e)}", exc_info=True)
        await db.rollback()
        raise server_error("Failed to add photos", e)

    if errors:
        logger.warning(f"Partial batch for gallery {gallery_id}: {len(photos)} created, {len(errors)} rejected")
    else:
        logger.info(f"Added {len(photos)} photos to gallery {gallery_id}")

    return PhotoBatchResult(
        created=[PhotoResponse.model_validate(photo) for photo in photos],
        errors=errors,
    )


@router.put("/{gallery_id}/photos/reorder", response_model=MessageResponse)
async def reorder_photos(
    gallery_id: int,
    payload: PhotoReorderRequest,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Reorder the photos of a gallery.

    Listed photos come first in the given order; the rest keep their relative
    order after them. Every photo gets a fresh dense order in one transaction.

    Raises:
        HTTPException: 404 if the gallery is missing, 400 if an id is not in this gallery
    """
    await get_or_404(db, PhotoGallery, gallery_id, "Gallery")

    result = await db.execute(
        select(GalleryPhoto.id)
        .where(GalleryPhoto.gallery_id == gallery_id)
        .order_by(GalleryPhoto.order.asc(), GalleryPhoto.id.asc())
    )
    current_ids = list(result.scalars().all())

    foreign_ids = set(payload.photo_ids) - set(current_ids)
    if foreign_ids:
        raise bad_request(
            "Photos not in gallery",
            f"Photo IDs not found in gallery {gallery_id}: {sorted(foreign_ids)}",
        )

    requested = set(payload.photo_ids)
    final_ids = list(payload.photo_ids) + [pid for pid in current_ids if pid not in requested]

    try:
        for position, photo_id in enumerate(final_ids):
            await db.execute(
                update(GalleryPhoto)
                .where(GalleryPhoto.id == photo_id)
                .values(order=position)
            )
        await db.commit()

    except Exception as e:
        logger.error(f"Error reordering photos of gallery {gallery_id}: {str(e)}", exc_info=True)
        await db.rollback()
        raise server_error("Failed to reorder photos", e)

    logger.info(f"Reordered {len(final_ids)} photos in gallery {gallery_id}")
    return MessageResponse(message=f"Reordered {len(final_ids)} photos")
