"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, get_settings
from config import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """
    Health check endpoint.

    Returns:
        dict: Status and environment information
    """
    return {
        "status": "ok",
        "env": settings.ENV,
    }


@router.get("/db-check")
async def db_check(db: AsyncSession = Depends(get_db)):
    """
    Check database connectivity.

    Returns:
        dict: Database status

    Raises:
        HTTPException: If database connection fails
    """
    try:
        result = await db.execute(text("SELECT 1"))
        result.scalar()
        return {"db": "ok"}
    except Exception:
        logger.exception("Database connectivity check failed")
        raise HTTPException(
            status_code=500,
            detail="Database connection failed",
        )
