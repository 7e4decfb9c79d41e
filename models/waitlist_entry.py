"""WaitlistEntry model and the join-waitlist request/response schemas."""

from datetime import datetime, UTC
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from db import Base

EMAIL_PATTERN = r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$"

UNIQUE_EMAIL_CONSTRAINT = "uq_waitlist_entries_application_email"
EMAIL_FORMAT_CONSTRAINT = "valid_email_format"


class WaitlistEntry(Base):
    """WaitlistEntry ORM model - one signup, immutable once written."""

    __tablename__ = "waitlist_entries"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    application_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("applications.application_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    country: Mapped[Optional[str]] = mapped_column(String(3), nullable=True, index=True)

    # Request metadata (only stored when CAPTURE_REQUEST_METADATA is enabled)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    referrer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("application_id", "email", name=UNIQUE_EMAIL_CONSTRAINT),
        # Email syntax is enforced by the database only.
        CheckConstraint(
            f"email ~* '{EMAIL_PATTERN}'",
            name=EMAIL_FORMAT_CONSTRAINT,
        ).ddl_if(dialect="postgresql"),
        CheckConstraint(
            f"email REGEXP '{EMAIL_PATTERN}'",
            name=EMAIL_FORMAT_CONSTRAINT,
        ).ddl_if(dialect="sqlite"),
    )


# Pydantic schemas
class JoinWaitlistRequest(BaseModel):
    """
    Inbound join-waitlist payload.

    Every field is optional here; the handler reports missing required
    fields itself so the response body stays fixed.
    """

    model_config = ConfigDict(populate_by_name=True)

    application_id: Optional[str] = Field(default=None, alias="applicationId")
    email: Optional[str] = None
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")
    country: Optional[str] = None


class PositionData(BaseModel):
    """Extra data returned when positions are reported."""

    position: int


class WaitlistResponse(BaseModel):
    """Response body for every join-waitlist outcome."""

    success: bool
    id: Optional[UUID] = None
    message: Optional[str] = None
    data: Optional[PositionData] = None


class WaitlistEntryResponse(BaseModel):
    """Schema for a stored waitlist entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    application_id: UUID
    email: str
    source_url: str
    country: Optional[str] = None
    created_at: datetime
