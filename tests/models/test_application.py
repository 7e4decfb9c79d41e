"""DB-backed tests for the Application model."""

from datetime import datetime

import pytest
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.application import Application, ApplicationCreate, ApplicationResponse
from models.waitlist_entry import WaitlistEntry


@pytest.mark.asyncio
async def test_create_application_defaults(db_session: AsyncSession):
    """Test: A new application is active with a generated id and timestamp."""
    application = Application(application_name="Launch App")
    db_session.add(application)
    await db_session.commit()
    await db_session.refresh(application)

    assert application.application_id is not None
    assert application.is_active is True
    assert isinstance(application.created_at, datetime)


@pytest.mark.asyncio
async def test_application_response_from_orm(application):
    """Test: ApplicationResponse serializes from the ORM object."""
    response = ApplicationResponse.model_validate(application)

    assert response.application_id == application.application_id
    assert response.application_name == "Launch App"
    assert response.is_active is True


@pytest.mark.asyncio
async def test_entries_reference_application(db_session: AsyncSession, application):
    """Test: Entries are looked up through their application id."""
    db_session.add(WaitlistEntry(application_id=application.application_id, email="a@example.com", source_url="https://x.com"))
    await db_session.commit()

    result = await db_session.execute(
        select(WaitlistEntry).where(WaitlistEntry.application_id == application.application_id)
    )
    assert len(result.scalars().all()) == 1


def test_application_create_requires_name():
    """Test: ApplicationCreate rejects an empty name."""
    with pytest.raises(ValidationError):
        ApplicationCreate(application_name="")
