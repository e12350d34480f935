"""
Transfer route (city pair) routes.
Inactive routes are hidden from public listings.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from transfer_site.database import get_db
from transfer_site.models import Route, apply_changes
from transfer_site.routes.common import get_or_404, not_found, server_error
from transfer_site.schemas import MessageResponse, RouteCreate, RouteResponse, RouteUpdate
from transfer_site.utils.jwt_auth import optional_admin, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes")


@router.get("", response_model=List[RouteResponse])
async def list_routes(
    show_all: bool = Query(False, alias="showAll"),
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    """List routes, most popular first. showAll (admin) includes inactive routes."""
    try:
        query = select(Route).order_by(Route.popularity_rating.desc(), Route.id.asc())
        if not (show_all and admin):
            query = query.where(Route.is_active.is_(True))

        result = await db.execute(query)
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Failed to list routes: {str(e)}", exc_info=True)
        raise server_error("Failed to retrieve routes", e)


@router.get("/{route_id}", response_model=RouteResponse)
async def get_route(
    route_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    route = await get_or_404(db, Route, route_id, "Route")
    if not route.is_active and not admin:
        raise not_found("Route", f"Route ID {route_id} does not exist")
    return route


@router.post("", response_model=RouteResponse, status_code=status.HTTP_201_CREATED)
async def create_route(
    payload: RouteCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    route = Route(**payload.model_dump())
    db.add(route)
    await db.commit()
    await db.refresh(route)

    logger.info(f"Created route {route.id}: {route.origin_city} -> {route.destination_city}")
    return route


@router.put("", response_model=RouteResponse)
async def update_route(
    payload: RouteUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Partially update the route named by `id` in the body."""
    route = await get_or_404(db, Route, payload.id, "Route")
    changes = payload.model_dump(exclude_unset=True, exclude={"id"})
    apply_changes(route, changes)
    await db.commit()
    await db.refresh(route)

    logger.info(f"Updated route {route.id}: {sorted(changes)}")
    return route


@router.delete("", response_model=MessageResponse)
async def delete_route(
    route_id: int = Query(..., alias="id"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    route = await get_or_404(db, Route, route_id, "Route")
    await db.delete(route)
    await db.commit()

    logger.info(f"Deleted route {route_id}")
    return MessageResponse(message="Route deleted")
