"""Repository for Application database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.application import Application


async def get_by_id(
    session: AsyncSession,
    *,
    application_id: UUID,
    active_only: bool = False,
) -> Application | None:
    """
    Get an application by ID.

    Args:
        session: Database session
        application_id: Application ID to fetch
        active_only: If True, inactive applications are treated as missing

    Returns:
        Application if found, None otherwise
    """
    query = select(Application).where(Application.application_id == application_id)

    if active_only:
        query = query.where(Application.is_active.is_(True))

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def list(session: AsyncSession) -> list[Application]:
    """
    List all applications, oldest first.

    Args:
        session: Database session

    Returns:
        List of applications
    """
    query = select(Application).order_by(Application.created_at, Application.application_name)
    result = await session.execute(query)
    return [application for application in result.scalars().all()]


async def create(session: AsyncSession, application: Application) -> Application:
    """
    Create a new application.

    Args:
        session: Database session
        application: Application instance to create

    Returns:
        Created application
    """
    session.add(application)
    await session.flush()
    await session.refresh(application)
    return application


async def save(session: AsyncSession, application: Application) -> Application:
    """
    Save (update) an existing application.

    Args:
        session: Database session
        application: Application instance to save

    Returns:
        Saved application
    """
    await session.flush()
    await session.refresh(application)
    return application
