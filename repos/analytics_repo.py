"""Read-only reporting queries over applications and waitlist entries.

Every query is a plain SQLAlchemy Core select that runs on both PostgreSQL
and SQLite; anything dialect-specific (string splitting, window functions)
is finished in the service layer instead.
"""

from sqlalchemy import Row, extract, func, literal, select, union_all
from sqlalchemy.ext.asyncio import AsyncSession

from models.application import Application
from models.waitlist_entry import WaitlistEntry


def _joined(*columns):
    """Select columns from waitlist_entries joined to applications."""
    return select(*columns).select_from(WaitlistEntry).join(
        Application, WaitlistEntry.application_id == Application.application_id
    )


async def signups_per_day(session: AsyncSession) -> list[Row]:
    """Signups per application per day, newest day first."""
    day = func.date(WaitlistEntry.created_at)
    signups = func.count(WaitlistEntry.id)
    query = (
        _joined(Application.application_name, day.label("date"), signups.label("signups"))
        .group_by(Application.application_name, day)
        .order_by(day.desc(), signups.desc(), Application.application_name)
    )
    result = await session.execute(query)
    return list(result.all())


async def signups_by_country(session: AsyncSession) -> list[Row]:
    """Signups per application and country, ignoring entries without a country."""
    signups = func.count(WaitlistEntry.id)
    query = (
        _joined(Application.application_name, WaitlistEntry.country, signups.label("signups"))
        .where(WaitlistEntry.country.is_not(None))
        .group_by(Application.application_name, WaitlistEntry.country)
        .order_by(signups.desc(), Application.application_name, WaitlistEntry.country)
    )
    result = await session.execute(query)
    return list(result.all())


async def top_source_urls(session: AsyncSession, *, limit: int = 10) -> list[Row]:
    """Most productive source URLs across all applications."""
    signups = func.count(WaitlistEntry.id)
    query = (
        _joined(Application.application_name, WaitlistEntry.source_url, signups.label("signups"))
        .group_by(Application.application_name, WaitlistEntry.source_url)
        .order_by(signups.desc(), WaitlistEntry.source_url)
        .limit(limit)
    )
    result = await session.execute(query)
    return list(result.all())


async def application_summary(session: AsyncSession) -> list[Row]:
    """Per-application totals, including applications with no signups."""
    total = func.count(WaitlistEntry.id)
    query = (
        select(
            Application.application_name,
            total.label("total_signups"),
            func.min(WaitlistEntry.created_at).label("first_signup"),
            func.max(WaitlistEntry.created_at).label("latest_signup"),
            func.count(WaitlistEntry.country.distinct()).label("countries_represented"),
        )
        .select_from(Application)
        .outerjoin(WaitlistEntry, Application.application_id == WaitlistEntry.application_id)
        .group_by(Application.application_id, Application.application_name)
        .order_by(total.desc(), Application.application_name)
    )
    result = await session.execute(query)
    return list(result.all())


async def hourly_pattern(session: AsyncSession) -> list[Row]:
    """Signups per application per hour of day."""
    hour = extract("hour", WaitlistEntry.created_at)
    query = (
        _joined(Application.application_name, hour.label("hour_of_day"), func.count(WaitlistEntry.id).label("signups"))
        .group_by(Application.application_name, hour)
        .order_by(Application.application_name, hour)
    )
    result = await session.execute(query)
    return list(result.all())


async def entry_emails(session: AsyncSession) -> list[Row]:
    """(application_name, email) for every entry."""
    query = _joined(Application.application_name, WaitlistEntry.email)
    result = await session.execute(query)
    return list(result.all())


async def data_quality(session: AsyncSession) -> list[Row]:
    """Per-application entry count and how many carry a country."""
    total = func.count(WaitlistEntry.id)
    query = (
        _joined(
            Application.application_name,
            total.label("total_entries"),
            func.count(WaitlistEntry.country).label("entries_with_country"),
        )
        .group_by(Application.application_id, Application.application_name)
        .order_by(total.desc(), Application.application_name)
    )
    result = await session.execute(query)
    return list(result.all())


async def export_rows(session: AsyncSession) -> list[Row]:
    """Every entry with its application name, newest first."""
    query = _joined(
        Application.application_name,
        WaitlistEntry.email,
        WaitlistEntry.source_url,
        WaitlistEntry.country,
        WaitlistEntry.created_at,
        WaitlistEntry.id.label("entry_id"),
    ).order_by(WaitlistEntry.created_at.desc())
    result = await session.execute(query)
    return list(result.all())


async def record_counts(session: AsyncSession) -> list[Row]:
    """Row counts of both tables."""
    query = union_all(
        select(
            literal("applications").label("table_name"),
            func.count(Application.application_id).label("record_count"),
        ),
        select(
            literal("waitlist_entries").label("table_name"),
            func.count(WaitlistEntry.id).label("record_count"),
        ),
    )
    result = await session.execute(query)
    return list(result.all())
