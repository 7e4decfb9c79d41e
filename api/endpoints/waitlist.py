"""Join-waitlist endpoint - public signup for an application's waitlist."""

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from api.cors import cors_headers
from api.deps import get_db, get_request_metadata, get_settings
from config import Settings
from models.waitlist_entry import JoinWaitlistRequest, PositionData, WaitlistResponse
from services import waitlist_service
from services.waitlist_service import JoinResult, JoinStatus, RequestMetadata

logger = logging.getLogger(__name__)

router = APIRouter()

# JoinStatus -> (HTTP status, message); the only place outcomes become HTTP
RESPONSES: dict[JoinStatus, tuple[int, str]] = {
    JoinStatus.CREATED: (status.HTTP_201_CREATED, "Successfully joined waitlist"),
    JoinStatus.MISSING_FIELDS: (status.HTTP_400_BAD_REQUEST, "Missing required fields"),
    JoinStatus.INVALID_COUNTRY: (status.HTTP_400_BAD_REQUEST, "Invalid country code"),
    JoinStatus.INVALID_EMAIL: (status.HTTP_400_BAD_REQUEST, "Invalid email address"),
    JoinStatus.APPLICATION_NOT_FOUND: (status.HTTP_400_BAD_REQUEST, "Invalid application ID"),
    JoinStatus.DUPLICATE_EMAIL: (status.HTTP_409_CONFLICT, "Email already registered"),
    JoinStatus.INTERNAL_ERROR: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
}


def to_response(result: JoinResult) -> JSONResponse:
    """Map a JoinResult to its HTTP response."""
    status_code, message = RESPONSES[result.status]
    body = WaitlistResponse(
        success=result.status is JoinStatus.CREATED,
        id=result.entry_id,
        message=message,
        data=PositionData(position=result.position) if result.position is not None else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


async def parse_join_request(request: Request) -> JoinWaitlistRequest | None:
    """
    Parse the request body.

    Returns None when the body is not a JSON object of string fields; the
    caller reports that as missing fields.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return JoinWaitlistRequest.model_validate(payload)
    except ValidationError:
        return None


@router.options("/join-waitlist", include_in_schema=False)
async def join_waitlist_options(request: Request, settings: Settings = Depends(get_settings)):
    """Answer a plain OPTIONS request; CORS pre-flights are answered by the middleware."""
    return PlainTextResponse("ok", headers=cors_headers(settings, request.headers.get("origin")))


@router.post(
    "/join-waitlist",
    response_model=WaitlistResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def join_waitlist(
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    request_metadata: RequestMetadata = Depends(get_request_metadata),
):
    """
    Join an application's waitlist.

    This is a public endpoint - the Authorization header required by the
    hosting platform is never inspected here.

    Body: ``{"applicationId", "email", "sourceUrl", "country"?}``

    Returns:
        JSONResponse: ``{success, id?, message, data?}`` with 201, 400, 409 or 500
    """
    try:
        payload = await parse_join_request(request)
        if payload is None:
            return to_response(JoinResult(JoinStatus.MISSING_FIELDS))

        result = await waitlist_service.join_waitlist(
            db,
            payload=payload,
            require_active_application=settings.REQUIRE_ACTIVE_APPLICATION,
            report_position=settings.REPORT_POSITION,
            request_metadata=request_metadata if settings.CAPTURE_REQUEST_METADATA else None,
        )
    except Exception:
        logger.exception("Error joining waitlist")
        result = JoinResult(JoinStatus.INTERNAL_ERROR)

    return to_response(result)
