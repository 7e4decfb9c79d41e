"""Service layer for waitlist reports and CSV export."""

import csv
from collections import Counter, defaultdict
from typing import TextIO

from sqlalchemy.ext.asyncio import AsyncSession

from models.analytics import DomainRow, ExportRow, GrowthRow, QualityRow
from repos import analytics_repo

EXPORT_COLUMNS = ["application_name", "email", "source_url", "country", "created_at", "entry_id"]


def _percent(part: int, whole: int) -> float:
    return round(part * 100.0 / whole, 2) if whole else 0.0


async def daily_growth(session: AsyncSession) -> list[GrowthRow]:
    """
    Cumulative signups per application and the day-over-day growth rate.

    The growth rate is the percent change of the cumulative count versus the
    previous day with signups; the first day is reported as 0.

    Returns:
        Rows ordered by application name, newest day first
    """
    per_application = defaultdict(list)
    for row in await analytics_repo.signups_per_day(session):
        per_application[row.application_name].append((row.date, row.signups))

    rows = []
    for application_name in sorted(per_application):
        cumulative = 0
        previous = None
        history = []
        for signup_date, daily_count in sorted(per_application[application_name]):
            cumulative += daily_count
            growth = 0.0 if previous is None else _percent(cumulative - previous, previous)
            history.append(
                GrowthRow(
                    application_name=application_name,
                    signup_date=signup_date,
                    daily_count=daily_count,
                    cumulative_count=cumulative,
                    growth_rate_percent=growth,
                )
            )
            previous = cumulative
        rows.extend(reversed(history))
    return rows


async def email_domains(session: AsyncSession, *, limit: int = 20) -> list[DomainRow]:
    """Top email domains per application."""
    counts = Counter(
        (row.application_name, row.email.partition("@")[2])
        for row in await analytics_repo.entry_emails(session)
    )
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        DomainRow(application_name=application_name, email_domain=domain, signups=signups)
        for (application_name, domain), signups in ranked[:limit]
    ]


async def data_quality(session: AsyncSession) -> list[QualityRow]:
    """Country completion rate per application."""
    return [
        QualityRow(
            application_name=row.application_name,
            total_entries=row.total_entries,
            entries_with_country=row.entries_with_country,
            country_completion_rate=_percent(row.entries_with_country, row.total_entries),
        )
        for row in await analytics_repo.data_quality(session)
    ]


async def write_export_csv(session: AsyncSession, stream: TextIO) -> int:
    """
    Write every waitlist entry as CSV.

    Args:
        session: Database session
        stream: Text stream to write to

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream)
    writer.writerow(EXPORT_COLUMNS)
    count = 0
    for row in await analytics_repo.export_rows(session):
        entry = ExportRow.model_validate(row)
        writer.writerow([
            entry.application_name,
            entry.email,
            entry.source_url,
            entry.country or "",
            entry.created_at.isoformat(),
            str(entry.entry_id),
        ])
        count += 1
    return count
