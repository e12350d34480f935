"""
Repository helpers for single-row configuration tables (id=1).

Rows are created with model defaults on first access and are re-read on every
request; nothing is cached in process.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from transfer_site.models import apply_changes

logger = logging.getLogger(__name__)

SINGLETON_ID = 1


async def get_or_create_default(db: AsyncSession, model):
    """
    Return the singleton row for `model`, inserting a defaulted one if absent.

    Args:
        db: Database session
        model: Settings model (SiteSettings, HomeSettings, TransferConfig, BenefitStats)

    Returns:
        The fully populated row
    """
    result = await db.execute(select(model).where(model.id == SINGLETON_ID))
    row = result.scalar_one_or_none()
    if row is not None:
        return row

    row = model(id=SINGLETON_ID)
    db.add(row)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent request inserted the row first
        await db.rollback()
        logger.info(f"Default {model.__tablename__} row already created, re-reading")
        result = await db.execute(select(model).where(model.id == SINGLETON_ID))
        return result.scalar_one()

    await db.refresh(row)
    logger.info(f"Created default {model.__tablename__} row")
    return row


async def update_singleton(db: AsyncSession, model, values: dict):
    """
    Apply `values` to the singleton row, creating it with defaults first if needed.

    Args:
        db: Database session
        model: Settings model
        values: Column name -> new value; only these columns change

    Returns:
        The updated row
    """
    row = await get_or_create_default(db, model)
    apply_changes(row, values)
    await db.flush()
    await db.refresh(row)
    return row
