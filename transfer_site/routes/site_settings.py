"""
Site configuration routes: contact details, home page hero, booking modal and
the benefits section.

Each configuration is a single row (id=1) created with defaults on first read.
"""
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from transfer_site.database import get_db
from transfer_site.models import (
    Benefit,
    BenefitStats,
    HomeSettings,
    SiteSettings,
    TransferConfig,
    Vehicle,
    apply_changes,
)
from transfer_site.routes.common import bad_request, get_or_404
from transfer_site.schemas import (
    BenefitCreate,
    BenefitResponse,
    BenefitsResponse,
    BenefitStatsResponse,
    BenefitStatsUpdate,
    BenefitUpdate,
    HomeSettingsResponse,
    HomeSettingsUpdate,
    MessageResponse,
    SiteSettingsResponse,
    SiteSettingsUpdate,
    TransferConfigResponse,
    TransferConfigUpdate,
    VehicleOption,
)
from transfer_site.services.singletons import get_or_create_default, update_singleton
from transfer_site.utils.jwt_auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_VEHICLE_PRICE = "от 250.00 EUR"


def _changes_or_400(payload) -> dict:
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise bad_request("No data provided", "At least one field must be supplied")
    return changes


def _load_json(raw: Optional[str], field: str, default):
    if not raw:
        return default
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning(f"Ignoring malformed transfer_config.{field}: {str(e)}")
        return default


def build_vehicle_options(config: TransferConfig, vehicles: List[Vehicle]) -> List[VehicleOption]:
    """
    Vehicle choices for the booking modal.

    With use_vehicles_from_db the options come from the active fleet; otherwise
    from the stored vehicle_options JSON. custom_image_urls then overrides the
    image of any option by its value.
    """
    if config.use_vehicles_from_db:
        options = [
            VehicleOption(
                value="-".join(vehicle.vehicle_class.lower().split()),
                label=vehicle.vehicle_class,
                price=DEFAULT_VEHICLE_PRICE,
                image=vehicle.image_url,
                desc=f"{vehicle.brand} {vehicle.model}",
                vehicle_id=vehicle.id,
            )
            for vehicle in vehicles
        ]
    else:
        options = [
            VehicleOption.model_validate(item)
            for item in _load_json(config.vehicle_options, "vehicle_options", [])
        ]

    custom_images = _load_json(config.custom_image_urls, "custom_image_urls", {})
    for option in options:
        if custom_images.get(option.value):
            option.image = custom_images[option.value]
    return options


# --- Site settings ----------------------------------------------------------

@router.get("/settings", response_model=SiteSettingsResponse)
async def get_site_settings(db: AsyncSession = Depends(get_db)):
    row = await get_or_create_default(db, SiteSettings)
    await db.commit()
    return row


@router.post("/settings", response_model=SiteSettingsResponse)
@router.put("/settings", response_model=SiteSettingsResponse)
async def update_site_settings(
    payload: SiteSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Update site settings; only supplied fields change.

    Raises:
        HTTPException: 400 if the body carries no fields
    """
    changes = _changes_or_400(payload)
    row = await update_singleton(db, SiteSettings, changes)
    await db.commit()

    logger.info(f"Updated site settings: {sorted(changes)}")
    return row


# --- Home page --------------------------------------------------------------

@router.get("/home", response_model=HomeSettingsResponse)
async def get_home_settings(db: AsyncSession = Depends(get_db)):
    row = await get_or_create_default(db, HomeSettings)
    await db.commit()
    return row


@router.post("/home", response_model=HomeSettingsResponse)
@router.put("/home", response_model=HomeSettingsResponse)
async def update_home_settings(
    payload: HomeSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    changes = _changes_or_400(payload)
    row = await update_singleton(db, HomeSettings, changes)
    await db.commit()

    logger.info(f"Updated home settings: {sorted(changes)}")
    return row


# --- Booking modal ----------------------------------------------------------

async def _transfer_config_response(db: AsyncSession, config: TransferConfig) -> TransferConfigResponse:
    vehicles = []
    if config.use_vehicles_from_db:
        result = await db.execute(
            select(Vehicle).where(Vehicle.is_active.is_(True)).order_by(Vehicle.id.asc())
        )
        vehicles = result.scalars().all()

    return TransferConfigResponse(
        id=config.id,
        title=config.title,
        description=config.description,
        use_vehicles_from_db=config.use_vehicles_from_db,
        vehicles=build_vehicle_options(config, vehicles),
    )


@router.get("/transfers", response_model=TransferConfigResponse)
async def get_transfer_config(db: AsyncSession = Depends(get_db)):
    config = await get_or_create_default(db, TransferConfig)
    await db.commit()
    return await _transfer_config_response(db, config)


@router.put("/transfers", response_model=TransferConfigResponse)
async def update_transfer_config(
    payload: TransferConfigUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """
    Update the booking modal. vehicleOptions and customImageUrls are stored as
    JSON text and replace the previous values wholesale.
    """
    changes = _changes_or_400(payload)
    if "vehicle_options" in changes:
        options = payload.vehicle_options
        changes["vehicle_options"] = (
            json.dumps([option.model_dump(by_alias=True) for option in options], ensure_ascii=False)
            if options is not None else None
        )
    if "custom_image_urls" in changes:
        urls = payload.custom_image_urls
        changes["custom_image_urls"] = json.dumps(urls, ensure_ascii=False) if urls is not None else None

    config = await update_singleton(db, TransferConfig, changes)
    await db.commit()

    logger.info(f"Updated transfer config: {sorted(changes)}")
    return await _transfer_config_response(db, config)


# --- Benefits ---------------------------------------------------------------

async def _ordered_benefits(db: AsyncSession) -> List[Benefit]:
    result = await db.execute(select(Benefit).order_by(Benefit.order.asc(), Benefit.id.asc()))
    return list(result.scalars().all())


@router.get("/benefits", response_model=BenefitsResponse)
async def get_benefits(db: AsyncSession = Depends(get_db)):
    """Benefits in display order together with the headline statistics."""
    benefits = await _ordered_benefits(db)
    stats = await get_or_create_default(db, BenefitStats)
    await db.commit()
    return BenefitsResponse(
        benefits=[BenefitResponse.model_validate(benefit) for benefit in benefits],
        stats=BenefitStatsResponse.model_validate(stats),
    )


@router.post("/benefits", response_model=BenefitResponse, status_code=status.HTTP_201_CREATED)
async def create_benefit(
    payload: BenefitCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Append a benefit after the current last one."""
    current_max = (await db.execute(select(func.max(Benefit.order)))).scalar()
    benefit = Benefit(**payload.model_dump(), order=(current_max or 0) + 1)
    db.add(benefit)
    await db.commit()
    await db.refresh(benefit)

    logger.info(f"Created benefit {benefit.id} at order {benefit.order}")
    return benefit


@router.put("/benefits/stats", response_model=BenefitStatsResponse)
async def update_benefit_stats(
    payload: BenefitStatsUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    changes = _changes_or_400(payload)
    row = await update_singleton(db, BenefitStats, changes)
    await db.commit()

    logger.info(f"Updated benefit stats: {sorted(changes)}")
    return row


@router.put("/benefits/{benefit_id}", response_model=BenefitResponse)
async def update_benefit(
    benefit_id: int,
    payload: BenefitUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    benefit = await get_or_404(db, Benefit, benefit_id, "Benefit")
    apply_changes(benefit, payload.model_dump(exclude_unset=True))
    await db.commit()
    await db.refresh(benefit)
    return benefit


@router.delete("/benefits", response_model=MessageResponse)
async def delete_benefit(
    benefit_id: int = Query(..., alias="id"),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    """Delete a benefit and renumber the remaining ones 1..n in the same transaction."""
    benefit = await get_or_404(db, Benefit, benefit_id, "Benefit")
    await db.delete(benefit)
    await db.flush()

    remaining = await _ordered_benefits(db)
    for position, item in enumerate(remaining, start=1):
        await db.execute(update(Benefit).where(Benefit.id == item.id).values(order=position))
    await db.commit()

    logger.info(f"Deleted benefit {benefit_id}, renumbered {len(remaining)} remaining")
    return MessageResponse(message="Benefit deleted")
