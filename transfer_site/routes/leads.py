"""
Lead routes: call-back applications, transfer bookings and contact messages.
Visitors submit leads; admins list them page by page and move them through
their status workflow.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from transfer_site.database import get_db
from transfer_site.models import (
    ApplicationRequest,
    ContactRequest,
    TransferRequest,
    Vehicle,
    apply_changes,
)
from transfer_site.routes.common import bad_request, get_or_404, server_error
from transfer_site.schemas import (
    ApplicationRequestCreate,
    ApplicationRequestResponse,
    ApplicationRequestsPage,
    ApplicationRequestStatusUpdate,
    ContactRequestCreate,
    ContactRequestResponse,
    ContactRequestsPage,
    ContactRequestUpdate,
    MessageResponse,
    PaginationMetadata,
    TransferRequestCreate,
    TransferRequestResponse,
    TransferRequestsPage,
    TransferRequestUpdate,
)
from transfer_site.utils.jwt_auth import require_admin
from transfer_site.utils.rate_limit import RATE_LIMITS, limiter

logger = logging.getLogger(__name__)

router = APIRouter()


async def _page(db: AsyncSession, model, status_filter: Optional[str], page: int, limit: int, options=()):
    """
    Fetch one newest-first page of `model`, optionally filtered by status.

    Returns:
        tuple: (rows, PaginationMetadata)
    """
    query = select(model)
    count_query = select(func.count(model.id))
    if status_filter:
        query = query.where(model.status == status_filter)
        count_query = count_query.where(model.status == status_filter)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.options(*options)
        .order_by(model.created_at.desc(), model.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return result.scalars().all(), PaginationMetadata.build(total, page, limit)


async def _load_transfer_request(db: AsyncSession, request_id: int) -> TransferRequest:
    result = await db.execute(
        select(TransferRequest)
        .options(selectinload(TransferRequest.vehicle))
        .where(TransferRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def _check_vehicle(db: AsyncSession, vehicle_id: Optional[int]) -> None:
    if vehicle_id is None:
        return
    result = await db.execute(select(Vehicle.id).where(Vehicle.id == vehicle_id))
    if result.scalar_one_or_none() is None:
        raise bad_request("Vehicle not found", f"Vehicle ID {vehicle_id} does not exist")


# --- Application requests ---------------------------------------------------

@router.post(
    "/application-requests",
    response_model=ApplicationRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(RATE_LIMITS["lead"])
async def create_application_request(
    request: Request,
    payload: ApplicationRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    lead = ApplicationRequest(**payload.model_dump())
    db.add(lead)
    await db.commit()
    await db.refresh(lead)

    logger.info(f"New application request {lead.id} via {lead.contact_method}")
    return lead


@router.get("/application-requests", response_model=ApplicationRequestsPage)
async def list_application_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    try:
        rows, pagination = await _page(db, ApplicationRequest, status_filter, page, limit)
        return ApplicationRequestsPage(
            requests=[ApplicationRequestResponse.model_validate(row) for row in rows],
            pagination=pagination,
        )
    except Exception as e:
        logger.error(f"Failed to list application requests: {str(e)}", exc_info=True)
        raise server_error("Failed to retrieve application requests", e)


@router.put("/application-requests", response_model=ApplicationRequestResponse)
@router.patch("/application-requests", response_model=ApplicationRequestResponse)
async def update_application_request(
    payload: ApplicationRequestStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    lead = await get_or_404(db, ApplicationRequest, payload.id, "Application request")
    lead.status = payload.status
    await db.commit()
    await db.refresh(lead)

    logger.info(f"Application request {lead.id} -> {lead.status}")
    return lead


@router.delete("/application-requests", response_model=MessageResponse)
async def delete_application_request(
    request_id: int = Query(..., alias="id"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    lead = await get_or_404(db, ApplicationRequest, request_id, "Application request")
    await db.delete(lead)
    await db.commit()

    logger.info(f"Deleted application request {request_id}")
    return MessageResponse(message="Application request deleted")


# --- Transfer requests ------------------------------------------------------

@router.post(
    "/transfer-requests",
    response_model=TransferRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(RATE_LIMITS["lead"])
async def create_transfer_request(
    request: Request,
    payload: TransferRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Book a transfer.

    Raises:
        HTTPException: 400 if vehicleId names no vehicle
    """
    await _check_vehicle(db, payload.vehicle_id)

    lead = TransferRequest(**payload.model_dump())
    db.add(lead)
    await db.commit()

    lead = await _load_transfer_request(db, lead.id)
    logger.info(f"New transfer request {lead.id}: {lead.origin} -> {lead.destination} on {lead.date}")
    return lead


@router.get("/transfer-requests", response_model=TransferRequestsPage)
async def list_transfer_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    try:
        rows, pagination = await _page(
            db, TransferRequest, status_filter, page, limit,
            options=(selectinload(TransferRequest.vehicle),),
        )
        return TransferRequestsPage(
            transfer_requests=[TransferRequestResponse.model_validate(row) for row in rows],
            pagination=pagination,
        )
    except Exception as e:
        logger.error(f"Failed to list transfer requests: {str(e)}", exc_info=True)
        raise server_error("Failed to retrieve transfer requests", e)


@router.put("/transfer-requests", response_model=TransferRequestResponse)
@router.patch("/transfer-requests", response_model=TransferRequestResponse)
async def update_transfer_request(
    payload: TransferRequestUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Partially update a transfer request (usually just its status)."""
    lead = await get_or_404(db, TransferRequest, payload.id, "Transfer request")
    changes = payload.model_dump(exclude_unset=True, exclude={"id"})
    if "vehicle_id" in changes:
        await _check_vehicle(db, changes["vehicle_id"])

    apply_changes(lead, changes)
    await db.commit()

    lead = await _load_transfer_request(db, payload.id)
    logger.info(f"Updated transfer request {lead.id}: {sorted(changes)}")
    return lead


@router.delete("/transfer-requests", response_model=MessageResponse)
async def delete_transfer_request(
    request_id: int = Query(..., alias="id"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    lead = await get_or_404(db, TransferRequest, request_id, "Transfer request")
    await db.delete(lead)
    await db.commit()

    logger.info(f"Deleted transfer request {request_id}")
    return MessageResponse(message="Transfer request deleted")


# --- Contact requests -------------------------------------------------------

@router.post(
    "/contact-requests",
    response_model=ContactRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(RATE_LIMITS["lead"])
async def create_contact_request(
    request: Request,
    payload: ContactRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    lead = ContactRequest(**payload.model_dump())
    db.add(lead)
    await db.commit()
    await db.refresh(lead)

    logger.info(f"New contact request {lead.id} from {lead.email}")
    return lead


@router.get("/contact-requests", response_model=ContactRequestsPage)
async def list_contact_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    try:
        rows, pagination = await _page(db, ContactRequest, status_filter, page, limit)
        return ContactRequestsPage(
            contact_requests=[ContactRequestResponse.model_validate(row) for row in rows],
            pagination=pagination,
        )
    except Exception as e:
        logger.error(f"Failed to list contact requests: {str(e)}", exc_info=True)
        raise server_error("Failed to retrieve contact requests", e)


@router.put("/contact-requests", response_model=ContactRequestResponse)
@router.patch("/contact-requests", response_model=ContactRequestResponse)
async def update_contact_request(
    payload: ContactRequestUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    lead = await get_or_404(db, ContactRequest, payload.id, "Contact request")
    changes = payload.model_dump(exclude_unset=True, exclude={"id"})
    apply_changes(lead, changes)
    await db.commit()
    await db.refresh(lead)

    logger.info(f"Updated contact request {lead.id}: {sorted(changes)}")
    return lead


@router.delete("/contact-requests", response_model=MessageResponse)
async def delete_contact_request(
    request_id: int = Query(..., alias="id"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    lead = await get_or_404(db, ContactRequest, request_id, "Contact request")
    await db.delete(lead)
    await db.commit()

    logger.info(f"Deleted contact request {request_id}")
    return MessageResponse(message="Contact request deleted")
