"""Application model - the namespace a waitlist belongs to."""

from datetime import datetime, UTC
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Boolean, DateTime, String, Uuid, true
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


class Application(Base):
    """Application ORM model - groups waitlist entries and scopes email uniqueness."""

    __tablename__ = "applications"

    application_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    application_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        {"comment": "Applications own waitlists; created out-of-band"},
    )


# Pydantic schemas
class ApplicationCreate(BaseModel):
    """Schema for creating an application."""

    application_name: str = Field(min_length=1, max_length=255)
    is_active: bool = True


class ApplicationResponse(BaseModel):
    """Schema for application response."""

    model_config = ConfigDict(from_attributes=True)

    application_id: UUID
    application_name: str
    is_active: bool
    created_at: datetime
