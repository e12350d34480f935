"""
Vehicle fleet routes.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from transfer_site.database import get_db
from transfer_site.models import TransferRequest, Vehicle, apply_changes
from transfer_site.routes.common import get_or_404, not_found, server_error
from transfer_site.schemas import MessageResponse, VehicleCreate, VehicleResponse, VehicleUpdate
from transfer_site.utils.jwt_auth import optional_admin, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicles")


@router.get("", response_model=List[VehicleResponse])
async def list_vehicles(
    show_all: bool = Query(False, alias="showAll"),
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    """List vehicles. showAll (admin) includes inactive ones."""
    try:
        query = select(Vehicle).order_by(Vehicle.id.asc())
        if not (show_all and admin):
            query = query.where(Vehicle.is_active.is_(True))

        result = await db.execute(query)
        return result.scalars().all()

    except Exception as e:
        logger.error(f"Failed to list vehicles: {str(e)}", exc_info=True)
        raise server_error("Failed to retrieve vehicles", e)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Optional[dict] = Depends(optional_admin),
):
    vehicle = await get_or_404(db, Vehicle, vehicle_id, "Vehicle")
    if not vehicle.is_active and not admin:
        raise not_found("Vehicle", f"Vehicle ID {vehicle_id} does not exist")
    return vehicle


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    payload: VehicleCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    vehicle = Vehicle(**payload.model_dump())
    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)

    logger.info(f"Created vehicle {vehicle.id}: {vehicle.brand} {vehicle.model}")
    return vehicle


@router.put("", response_model=VehicleResponse)
async def update_vehicle(
    payload: VehicleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Partially update the vehicle named by `id` in the body."""
    vehicle = await get_or_404(db, Vehicle, payload.id, "Vehicle")
    changes = payload.model_dump(exclude_unset=True, exclude={"id"})
    apply_changes(vehicle, changes)
    await db.commit()
    await db.refresh(vehicle)

    logger.info(f"Updated vehicle {vehicle.id}: {sorted(changes)}")
    return vehicle


@router.delete("", response_model=MessageResponse)
async def delete_vehicle(
    vehicle_id: int = Query(..., alias="id"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Delete a vehicle; transfer requests that referenced it keep no vehicle."""
    vehicle = await get_or_404(db, Vehicle, vehicle_id, "Vehicle")

    await db.execute(
        update(TransferRequest)
        .where(TransferRequest.vehicle_id == vehicle_id)
        .values(vehicle_id=None)
    )
    await db.delete(vehicle)
    await db.commit()

    logger.info(f"Deleted vehicle {vehicle_id}")
    return MessageResponse(message="Vehicle deleted")
