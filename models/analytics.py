"""Pydantic schemas for waitlist reports."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class GrowthRow(BaseModel):
    """Daily and cumulative signups for one application on one day."""

    application_name: str
    signup_date: date
    daily_count: int
    cumulative_count: int
    growth_rate_percent: float


class DomainRow(BaseModel):
    """Signups per email domain."""

    application_name: str
    email_domain: str
    signups: int


class QualityRow(BaseModel):
    """How complete an application's entries are."""

    application_name: str
    total_entries: int
    entries_with_country: int
    country_completion_rate: float


class ExportRow(BaseModel):
    """One exported waitlist entry."""

    model_config = ConfigDict(from_attributes=True)

    application_name: str
    email: str
    source_url: str
    country: Optional[str] = None
    created_at: datetime
    entry_id: UUID
