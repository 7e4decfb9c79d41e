"""FastAPI dependencies for configuration, database and request context."""

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings
from db import get_db as get_db_session
from services.waitlist_service import RequestMetadata


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency to get database session.
    Reuses the get_db function from db.py.
    """
    async for session in get_db_session(request):
        yield session


def get_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_request_metadata(request: Request) -> RequestMetadata:
    """
    Client details for a signup.

    The first X-Forwarded-For hop wins over the socket peer address, since
    the service normally runs behind a proxy.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip_address = forwarded_for.split(",")[0].strip() or None
    else:
        ip_address = request.client.host if request.client else None

    return RequestMetadata(
        ip_address=ip_address,
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
    )
