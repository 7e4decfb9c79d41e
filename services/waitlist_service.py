"""Service layer for joining a waitlist.

Returns an explicit ``JoinResult`` instead of raising for expected outcomes;
the HTTP layer maps each ``JoinStatus`` to a response exactly once.
"""

import enum
import logging
import re
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.waitlist_entry import (
    EMAIL_FORMAT_CONSTRAINT,
    UNIQUE_EMAIL_CONSTRAINT,
    JoinWaitlistRequest,
    WaitlistEntry,
)
from repos import applications_repo, waitlist_entries_repo

logger = logging.getLogger(__name__)

COUNTRY_PATTERN = re.compile(r"^[A-Z]{2,3}$")

# SQLSTATE codes
UNIQUE_VIOLATION = "23505"
CHECK_VIOLATION = "23514"


class JoinStatus(str, enum.Enum):
    """Outcome of a join-waitlist attempt."""

    CREATED = "created"
    MISSING_FIELDS = "missing_fields"
    INVALID_COUNTRY = "invalid_country"
    INVALID_EMAIL = "invalid_email"
    APPLICATION_NOT_FOUND = "application_not_found"
    DUPLICATE_EMAIL = "duplicate_email"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class JoinResult:
    """Result of ``join_waitlist``; ``entry_id`` is only set when CREATED."""

    status: JoinStatus
    entry_id: UUID | None = None
    position: int | None = None


@dataclass(frozen=True)
class RequestMetadata:
    """Client details captured alongside a signup."""

    ip_address: str | None = None
    user_agent: str | None = None
    referrer: str | None = None


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address."""
    return email.strip().lower()


def normalize_country(country: str | None) -> str | None:
    """
    Normalize an optional country code.

    Returns None for a blank value, the upper-cased code otherwise.

    Raises:
        ValueError: If the code is not 2-3 ASCII letters
    """
    if country is None or not country.strip():
        return None
    code = country.strip().upper()
    if not COUNTRY_PATTERN.match(code):
        raise ValueError(f"Invalid country code: {country!r}")
    return code


def has_required_fields(payload: JoinWaitlistRequest) -> bool:
    """applicationId, email and sourceUrl must all be non-blank."""
    return all(
        value is not None and value.strip()
        for value in (payload.application_id, payload.email, payload.source_url)
    )


def _integrity_error_code(error: IntegrityError) -> str | None:
    """SQLSTATE of the driver error (psycopg exposes sqlstate, psycopg2 pgcode)."""
    orig = getattr(error, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(error: IntegrityError) -> bool:
    """Check whether an IntegrityError is the (application, email) unique constraint."""
    if _integrity_error_code(error) == UNIQUE_VIOLATION:
        return True
    message = str(error.orig if error.orig is not None else error).lower()
    return any(pattern in message for pattern in [
        UNIQUE_EMAIL_CONSTRAINT,
        "unique constraint",
        "duplicate key",
    ])


def is_email_format_violation(error: IntegrityError) -> bool:
    """Check whether an IntegrityError is the email format check constraint."""
    message = str(error.orig if error.orig is not None else error).lower()
    if _integrity_error_code(error) == CHECK_VIOLATION:
        return EMAIL_FORMAT_CONSTRAINT in message
    return "check constraint" in message and EMAIL_FORMAT_CONSTRAINT in message


async def join_waitlist(
    session: AsyncSession,
    *,
    payload: JoinWaitlistRequest,
    require_active_application: bool = False,
    report_position: bool = False,
    request_metadata: RequestMetadata | None = None,
) -> JoinResult:
    """
    Add an email to an application's waitlist.

    Uniqueness and email syntax are left to the database constraints; this
    function only classifies their violations.

    Args:
        session: Database session
        payload: Parsed request body
        require_active_application: Treat inactive applications as unknown
        report_position: Compute the entry's ordinal position after insert
        request_metadata: Client details to store with the entry, if any

    Returns:
        JoinResult describing the outcome

    Raises:
        IntegrityError: For constraint violations other than the two handled ones
    """
    if not has_required_fields(payload):
        return JoinResult(JoinStatus.MISSING_FIELDS)

    try:
        country = normalize_country(payload.country)
    except ValueError:
        return JoinResult(JoinStatus.INVALID_COUNTRY)

    # A non-UUID identifier cannot reference an existing application
    try:
        application_id = UUID(payload.application_id.strip())
    except ValueError:
        return JoinResult(JoinStatus.APPLICATION_NOT_FOUND)

    application = await applications_repo.get_by_id(
        session,
        application_id=application_id,
        active_only=require_active_application,
    )
    if not application:
        logger.info("Rejected signup for unknown application %s", application_id)
        return JoinResult(JoinStatus.APPLICATION_NOT_FOUND)

    metadata = request_metadata or RequestMetadata()
    entry = WaitlistEntry(
        application_id=application.application_id,
        email=normalize_email(payload.email),
        source_url=payload.source_url,
        country=country,
        ip_address=metadata.ip_address,
        user_agent=metadata.user_agent,
        referrer=metadata.referrer,
    )

    position = None
    try:
        entry = await waitlist_entries_repo.create(session, entry)
        # Counted inside the insert transaction so a failure here stores nothing
        if report_position:
            position = await waitlist_entries_repo.count_position(session, entry)
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        if is_unique_violation(e):
            logger.info("Duplicate signup for application %s", application_id)
            return JoinResult(JoinStatus.DUPLICATE_EMAIL)
        if is_email_format_violation(e):
            return JoinResult(JoinStatus.INVALID_EMAIL)
        raise

    logger.info("Waitlist entry %s created for application %s", entry.id, application_id)
    return JoinResult(JoinStatus.CREATED, entry_id=entry.id, position=position)
