"""Service layer for Application administration (operator CLI)."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from models.application import Application, ApplicationCreate
from repos import applications_repo

logger = logging.getLogger(__name__)


class ApplicationNotFoundError(LookupError):
    """Raised when an application ID does not exist."""


async def create_application(
    session: AsyncSession,
    *,
    payload: ApplicationCreate,
) -> Application:
    """
    Create a new application.

    Args:
        session: Database session
        payload: Application creation data

    Returns:
        Created application
    """
    application = Application(
        application_name=payload.application_name.strip(),
        is_active=payload.is_active,
    )
    application = await applications_repo.create(session, application)
    await session.commit()
    logger.info("Created application %s (%s)", application.application_id, application.application_name)
    return application


async def list_applications(session: AsyncSession) -> list[Application]:
    """List all applications."""
    return await applications_repo.list(session)


async def set_active(
    session: AsyncSession,
    *,
    application_id: UUID,
    is_active: bool,
) -> Application:
    """
    Activate or deactivate an application.

    Raises:
        ApplicationNotFoundError: If the application does not exist
    """
    application = await applications_repo.get_by_id(session, application_id=application_id)
    if not application:
        raise ApplicationNotFoundError(f"Application {application_id} not found")

    application.is_active = is_active
    application = await applications_repo.save(session, application)
    await session.commit()
    logger.info("Application %s is_active=%s", application_id, is_active)
    return application
