"""Repository for WaitlistEntry database operations."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.waitlist_entry import WaitlistEntry


async def create(session: AsyncSession, entry: WaitlistEntry) -> WaitlistEntry:
    """
    Insert a waitlist entry.

    Constraint violations surface here as IntegrityError on flush.

    Args:
        session: Database session
        entry: WaitlistEntry instance to insert

    Returns:
        Inserted entry
    """
    session.add(entry)
    await session.flush()
    await session.refresh(entry)
    return entry


async def get_by_id(session: AsyncSession, *, entry_id: UUID) -> WaitlistEntry | None:
    """Get a waitlist entry by ID."""
    result = await session.execute(select(WaitlistEntry).where(WaitlistEntry.id == entry_id))
    return result.scalar_one_or_none()


async def list_for_application(
    session: AsyncSession,
    *,
    application_id: UUID,
) -> list[WaitlistEntry]:
    """List an application's entries in signup order."""
    query = (
        select(WaitlistEntry)
        .where(WaitlistEntry.application_id == application_id)
        .order_by(WaitlistEntry.created_at)
    )
    result = await session.execute(query)
    return [entry for entry in result.scalars().all()]


async def count_position(session: AsyncSession, entry: WaitlistEntry) -> int:
    """
    Ordinal position of an entry within its application's waitlist.

    Counts every entry of the same application created at or before this one.
    """
    query = select(func.count(WaitlistEntry.id)).where(
        WaitlistEntry.application_id == entry.application_id,
        WaitlistEntry.created_at <= entry.created_at,
    )
    result = await session.execute(query)
    return result.scalar_one()
