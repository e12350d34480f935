"""
Helpers shared by the routers: error construction and row lookup.
"""
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


def not_found(entity: str, detail: Optional[str] = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": f"{entity} not found", "detail": detail or f"{entity} does not exist"},
    )


def bad_request(error: str, detail: Optional[str] = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": error, "detail": detail or error},
    )


def server_error(error: str, exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": error, "detail": str(exc)},
    )


async def get_or_404(db: AsyncSession, model, row_id: int, entity: str):
    """
    Load a row by primary key.

    Raises:
        HTTPException: 404 if no row has this id
    """
    result = await db.execute(select(model).where(model.id == row_id))
    row = result.scalar_one_or_none()
    if row is None:
        raise not_found(entity, f"{entity} ID {row_id} does not exist")
    return row

